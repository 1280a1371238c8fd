"""Exception hierarchy for bpax analyses."""


class BpaxError(Exception):
    """Base class for all bpax failures."""


class MalformedXmlError(BpaxError):
    """Uploaded content is not parseable XML."""

    def __init__(self, file_name: str, detail: str):
        self.file_name = file_name
        self.detail = detail
        super().__init__(f"Invalid file '{file_name}': content is not well-formed XML ({detail})")


class UnrecognizedFormatError(BpaxError):
    """Content parses but is not the kind of Blue Prism export claimed."""

    def __init__(self, file_name: str, expected_root: str, actual_root: str):
        self.file_name = file_name
        self.expected_root = expected_root
        self.actual_root = actual_root
        super().__init__(
            f"Unrecognized format in '{file_name}': expected <{expected_root}> root, found <{actual_root}>"
        )


class FileRejectedError(BpaxError):
    """File refused at intake (size limit, extension allow-list, unreadable)."""
