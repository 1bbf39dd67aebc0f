from enum import Enum


class BaseEnum(Enum):
    @classmethod
    def choices(cls):
        return [(item.value, item.name) for item in cls]


class TokenType(BaseEnum):
    ACCESS = "access"


class OrderBy(BaseEnum):
    RELEVANCE = "relevance"
    NEWEST = "newest"


class PrintType(BaseEnum):
    ALL = "all"
    BOOKS = "books"
    MAGAZINES = "magazines"
