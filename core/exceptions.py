"""Custom exceptions for Windesk"""


class WindeskError(Exception):
    """Base exception for all Windesk errors"""
    pass


class FileReadError(WindeskError):
    """Error reading an uploaded file into memory"""
    def __init__(self, message: str, file_path: str = None):
        super().__init__(message)
        self.file_path = file_path


class FileParseError(WindeskError):
    """Error decoding a workbook"""
    def __init__(self, message: str, file_path: str = None):
        super().__init__(message)
        self.file_path = file_path


class UnsupportedFileError(FileParseError):
    """File extension has no parser"""
    pass


class ValidationError(WindeskError):
    """Input validation error"""
    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class DatabaseError(WindeskError):
    """Database operation error"""
    pass


class NotFoundError(DatabaseError):
    """Record does not exist"""
    pass


class DuplicateError(DatabaseError):
    """Record with the same key already exists"""
    pass


class AuthError(WindeskError):
    """Authentication error"""
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidCredentialsError(AuthError):
    """Unknown id or wrong password"""
    def __init__(self, message: str = "아이디 또는 비밀번호가 일치하지 않습니다."):
        super().__init__(message, status_code=401)


class PartnerNotApprovedError(AuthError):
    """Partner account has not been approved yet"""
    def __init__(self, message: str = "승인 대기중인 파트너입니다. 관리자에게 문의하세요."):
        super().__init__(message, status_code=403)


class ExportError(WindeskError):
    """Export produced nothing to write"""
    pass
