class ArgoConvertError(Exception):
    """Base class for conversion errors"""
    pass


class ArgoFileError(ArgoConvertError):
    """A file cannot be converted and is skipped"""
    pass


class MissingDimensionError(ArgoFileError):
    pass


class MissingParameterError(ArgoFileError):
    pass


class FieldDecodeError(ArgoConvertError):
    pass
