"""
Domain errors shared by all aggregates and services.

Each error kind maps to one transport status in the app factory
(see lifeboard.main). NotFoundError is raised both for missing documents and
for documents owned by somebody else: callers must not be able to tell the two
apart.
"""


class DomainError(Exception):
    """Базовая ошибка предметной области"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError, ValueError):
    """Некорректные или недостающие данные"""
    pass


class DuplicateNameError(ValidationError):
    """Имя совпадает (без учёта регистра) с именем соседней записи"""
    pass


class NotFoundError(DomainError):
    """Документ или вложенная запись не найдены (или принадлежат другому владельцу)"""
    pass


class UnauthorizedError(DomainError):
    """Нет идентификатора владельца / неверные учётные данные"""
    pass


class ConflictError(DomainError):
    """Документ был изменён параллельным запросом после загрузки"""
    pass


class StorageError(DomainError):
    """Сбой хранилища (не повторяется автоматически)"""
    pass


def require_owner(owner_id) -> None:
    """Every read/write is scoped by owner; an empty owner is rejected outright."""
    if owner_id is None or owner_id == "" or owner_id == 0:
        raise UnauthorizedError("Not authenticated")
