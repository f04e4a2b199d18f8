"""
ARGO Profile Document Converter

Converts ARGO NetCDF profile files into linked profile and metadata documents
ready to be stored in a document store and queried by location and time.
"""

__version__ = "1.0.0"
__author__ = "ARGO Data Platform Team"
__description__ = "Conversion of ARGO NetCDF profiles into profile and metadata documents"
