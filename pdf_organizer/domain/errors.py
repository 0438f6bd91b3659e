class PdfOrganizerError(Exception):
    pass


class ValidationError(PdfOrganizerError):
    pass


class ParsingError(PdfOrganizerError):
    pass


class SourceLoadError(ParsingError):
    def __init__(self, source_name: str, message: str = "File is corrupted or unreadable") -> None:
        super().__init__(f"{source_name}: {message}")
        self.source_name = source_name


class EngineUnavailableError(PdfOrganizerError):
    pass
