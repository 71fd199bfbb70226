from pathlib import Path


class SleuthError(Exception):
    pass


class InvalidTemplate(SleuthError):
    pass


class InvalidConfiguration(SleuthError):
    pass


class FileUnreadable(SleuthError):
    """Raised for a single file that can't be read; the scan carries on."""

    def __init__(self, path: Path, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f'cannot read {path} ({format_error(cause)})')


def format_error(e: BaseException):
    ecls = e.__class__.__name__
    emsg = str(e)
    return f'{ecls}: {emsg}'
