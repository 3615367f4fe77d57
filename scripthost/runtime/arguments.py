from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

from scripthost.runtime.context import InterpreterContext

ARG_NAME = "arg"


class ArgumentTable(Mapping[int, str]):
    """Read-only, index-addressed view of the process arguments.

    ``arg[0]`` is the program path, ``arg[1:]`` the user tokens, as handed
    over by the operating system.
    """

    __slots__ = ("_values",)

    def __init__(self, arguments: Sequence[str]) -> None:
        values = tuple(arguments)
        for index, value in enumerate(values):
            if not isinstance(value, str):
                raise TypeError(
                    f"argument {index} must be str, not {type(value).__name__}"
                )
        self._values = values

    def __getitem__(self, index: int) -> str:
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise KeyError(index)
        try:
            return self._values[index]
        except IndexError:
            raise KeyError(index) from None

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._values)))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ArgumentTable({list(self._values)!r})"

    def as_tuple(self) -> tuple[str, ...]:
        return self._values


def marshal(context: InterpreterContext, arguments: Sequence[str]) -> ArgumentTable:
    """Publish ``arguments`` into ``context`` as the ``arg`` table.

    The table is fully built before it becomes visible to hosted code.
    """
    table = ArgumentTable(arguments)
    context.publish(ARG_NAME, table)
    return table
