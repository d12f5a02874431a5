"""Unit tests for sshd_config directive editing."""

from torbootstrap.core.directives import insert_directive, remove_directive, set_directive


class TestSetDirective:
    """Tests for set_directive function."""

    def test_replaces_commented_default(self) -> None:
        """A commented-out default is replaced in place."""
        lines = ["Port 22", "#PasswordAuthentication yes", "UsePAM yes"]

        result = set_directive(lines, "PasswordAuthentication", "no")

        assert result == ["Port 22", "PasswordAuthentication no", "UsePAM yes"]

    def test_drops_later_duplicates(self) -> None:
        """Only the first occurrence survives."""
        lines = ["#PermitRootLogin prohibit-password", "PermitRootLogin no", "Port 22"]

        result = set_directive(lines, "PermitRootLogin", "yes")

        assert result == ["PermitRootLogin yes", "Port 22"]

    def test_matches_case_insensitively(self) -> None:
        """Keywords match regardless of case, as in sshd."""
        result = set_directive(["passwordauthentication yes"], "PasswordAuthentication", "no")

        assert result == ["PasswordAuthentication no"]

    def test_does_not_match_longer_keyword(self) -> None:
        """A keyword that merely starts with the key is left alone."""
        lines = ["PermitRootLoginExtra yes"]

        result = set_directive(lines, "PermitRootLogin", "yes")

        assert result == ["PermitRootLoginExtra yes", "PermitRootLogin yes"]

    def test_inserts_before_match_block(self) -> None:
        """A missing directive goes into the global section."""
        lines = ["Port 22", "", "Match User backup", "    PasswordAuthentication yes"]

        result = set_directive(lines, "PasswordAuthentication", "no")

        assert result == [
            "Port 22",
            "PasswordAuthentication no",
            "",
            "Match User backup",
            "    PasswordAuthentication yes",
        ]

    def test_leaves_match_block_alone(self) -> None:
        """Directives inside Match blocks are never edited."""
        lines = [
            "PasswordAuthentication yes",
            "Match Address 10.0.0.0/8",
            "PasswordAuthentication yes",
        ]

        result = set_directive(lines, "PasswordAuthentication", "no")

        assert result[0] == "PasswordAuthentication no"
        assert result[1:] == lines[1:]


class TestAllowUsers:
    """Tests for remove_directive and insert_directive."""

    def test_remove_keeps_comments(self) -> None:
        """Commented lines are not removed."""
        lines = ["#AllowUsers nobody", "AllowUsers alice bob", "Port 22"]

        assert remove_directive(lines, "AllowUsers") == ["#AllowUsers nobody", "Port 22"]

    def test_insert_above_trailing_blank_lines(self) -> None:
        """Inserted directives go above blank lines closing the section."""
        lines = ["Port 22", "", ""]

        result = insert_directive(lines, "AllowUsers", "alice")

        assert result == ["Port 22", "AllowUsers alice", "", ""]

    def test_remove_then_insert_is_stable(self) -> None:
        """Replacing the allow-list twice gives the same file."""
        lines = ["Port 22", "AllowUsers bob", "", "Match User bob", "    X11Forwarding no"]

        once = insert_directive(remove_directive(lines, "AllowUsers"), "AllowUsers", "alice")
        twice = insert_directive(remove_directive(once, "AllowUsers"), "AllowUsers", "alice")

        assert once == ["Port 22", "AllowUsers alice", "", "Match User bob", "    X11Forwarding no"]
        assert twice == once
