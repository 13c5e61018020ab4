from __future__ import annotations

import pytest

from storm.Config import (
    Arg, Array, ArrayItem, Assign, Call, Comment, Module, Name, Node, Raw, Scalar, Standard, StormPrinter
)


def disks_node() -> Assign:
    return Assign('disks', Array([
        ArrayItem(Array([ArrayItem(Scalar('local'), Scalar('driver'))]), Scalar('local'), comments=['Local disk']),
    ]))


class TestStandardPrinter:
    """Test suite for the standard printer."""

    @pytest.fixture
    def printer(self) -> Standard:
        return Standard()

    def test_inline_arrays(self, printer: Standard) -> None:
        node = Assign('disks', Array([ArrayItem(Array([ArrayItem(Scalar('local'), Scalar('driver'))]), Scalar('local'))]))
        assert printer.pretty_print([node]) == "disks = {'local': {'driver': 'local'}}"

    def test_lists_and_calls(self, printer: Standard) -> None:
        nodes = [
            Assign('channels', Array([ArrayItem(Scalar('single')), ArrayItem(Scalar('daily'))], 'list')),
            Assign('debug', Call(Name('os.getenv'), [Arg(Scalar('APP_DEBUG')), Arg(Scalar(False), 'default')])),
        ]
        assert printer.pretty_print(nodes) == (
            "channels = ['single', 'daily']\n"
            "debug = os.getenv('APP_DEBUG', default=False)"
        )

    def test_commented_items_go_multiline(self, printer: Standard) -> None:
        assert printer.pretty_print([disks_node()]) == (
            "disks = {\n"
            "    # Local disk\n"
            "    'local': {'driver': 'local'},\n"
            "}"
        )

    def test_annotated_assignment(self, printer: Standard) -> None:
        node = Assign('connections', Array([]), annotation='Dict[str, Any]')
        assert printer.pretty_print([node]) == 'connections: Dict[str, Any] = {}'

    def test_unknown_node(self, printer: Standard) -> None:
        with pytest.raises(ValueError):
            printer.pretty_print([Node()])

    def test_outdent_below_top_level(self, printer: Standard) -> None:
        with pytest.raises(RuntimeError):
            printer.outdent()

    def test_unknown_array_kind(self) -> None:
        with pytest.raises(ValueError):
            Array([], 'set')


class TestStormPrinter:
    """Test suite for the printer of generated config files."""

    @pytest.fixture
    def printer(self) -> StormPrinter:
        return StormPrinter()

    def test_arrays_are_always_multiline(self, printer: StormPrinter) -> None:
        node = Assign('channels', Array([ArrayItem(Scalar('single')), ArrayItem(Scalar('daily'))], 'list'))
        assert printer.pretty_print([node]) == (
            "channels = [\n"
            "    'single',\n"
            "    'daily',\n"
            "]"
        )

    def test_empty_array_stays_inline(self, printer: StormPrinter) -> None:
        assert printer.pretty_print([Assign('disks', Array([]))]) == 'disks = {}'

    def test_calls_stay_inline(self, printer: StormPrinter) -> None:
        node = Assign('env', Call(Name('os.getenv'), [Arg(Scalar('APP_ENV')), Arg(Scalar('production'))]))
        assert printer.pretty_print([node]) == "env = os.getenv('APP_ENV', 'production')"

    def test_comments_are_set_apart(self, printer: StormPrinter) -> None:
        module = Module([Raw('from __future__ import annotations\n'), disks_node()], comments=['Filesystems'])

        assert printer.pretty_print_file(module) == (
            "# Filesystems\n"
            "\n"
            "from __future__ import annotations\n"
            "\n"
            "disks = {\n"
            "\n"
            "    # Local disk\n"
            "\n"
            "    'local': {\n"
            "        'driver': 'local',\n"
            "    },\n"
            "}\n"
        )

    def test_multiline_comment(self) -> None:
        comment = Comment("""
            First line
            # Second line
        """)
        assert comment.get_reformatted_text() == '# First line\n# Second line'
