"""Infrastructure Errors"""


class ConfigurationError(Exception):
    """スタックを合成できない設定エラー"""
