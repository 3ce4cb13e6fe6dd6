class DomainError(Exception):
    code = "E_DOMAIN"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)


class AIUnavailableError(DomainError):
    code = "E_AI_UNAVAILABLE"


class StorageUnavailableError(DomainError):
    code = "E_STORAGE_UNAVAILABLE"


class AnalysisClientError(DomainError):
    code = "E_ANALYSIS_CLIENT"

    user_message = "Wystąpił błąd podczas analizy AI. Spróbuj ponownie za chwilę."
