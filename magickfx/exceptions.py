from typing import Optional


class ValidationError(Exception):
    """magickfxでのバリデーションエラーを表す例外。"""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        line_number: Optional[int] = None,
        column_number: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.option = option
        self.line_number = line_number
        self.column_number = column_number

    def __str__(self):
        if self.line_number is not None:
            return f"Error: {self.message} (Line: {self.line_number}, Column: {self.column_number})"
        return f"Error: {self.message}"


class OptionError(ValidationError):
    """フラグ指定の誤り。CLIはエラーと共にヘルプを表示する。"""

    def __init__(
        self,
        message: str,
        option: Optional[str] = None,
        help_text: Optional[str] = None,
    ):
        super().__init__(message, option=option)
        self.help_text = help_text


class FileResolutionError(ValidationError):
    """入力ファイルを一意に解決できなかったことを表す例外。"""


class DependencyError(Exception):
    """外部ツール (ImageMagick) が利用できないことを表す例外。"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"Dependency Error: {self.message}"


class PipelineError(Exception):
    """委譲したImageMagickコマンドの失敗を表す例外。"""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.returncode = returncode

    def __str__(self):
        return f"Pipeline Error: {self.message}"
