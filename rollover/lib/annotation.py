import dataclasses
import re

ROLLOVER_PATTERN = re.compile(r"Rollover Count: (\d+)")
ROLLOVER_LABEL = "Rollover Count"


@dataclasses.dataclass(frozen=True)
class RolloverCount:
    """The `Rollover Count: <n>` fragment carried inside a task's notes.

    The fragment is the only record of how often a task has been rolled over,
    so everything else in the notes must survive parse/bump/render untouched.
    """

    value: int
    notes: str
    span: tuple[int, int] | None = None

    @classmethod
    def parse(cls, notes: str | None) -> "RolloverCount":
        notes = notes or ""
        match = ROLLOVER_PATTERN.search(notes)
        if not match:
            return cls(value=0, notes=notes)
        return cls(value=int(match.group(1)), notes=notes, span=match.span())

    def bump(self) -> "RolloverCount":
        return dataclasses.replace(self, value=self.value + 1)

    def render(self) -> str:
        fragment = f"{ROLLOVER_LABEL}: {self.value}"
        if self.span is not None:
            start, end = self.span
            return self.notes[:start] + fragment + self.notes[end:]
        if self.value == 0:
            return self.notes
        separator = "\n\n" if self.notes else ""
        return f"{self.notes}{separator}{fragment}"


def bump_rollover(notes: str | None) -> str:
    return RolloverCount.parse(notes).bump().render()
