from __future__ import annotations


class BingoError(Exception):
    pass


class InvalidWordCount(BingoError, ValueError):
    def __init__(self, required: int | None, actual: int) -> None:
        self.required = required
        self.actual = actual
        if required is None:
            msg = "Word list is empty; cannot generate cards"
        else:
            msg = f"Need exactly {required} words for this grid, got {actual}"
        super().__init__(msg)


class ExportFailure(BingoError, RuntimeError):
    pass


class WizardError(BingoError, ValueError):
    pass
