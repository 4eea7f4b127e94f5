"""
Land Registry Service

Land registrations and ownership transfers, each backed by an uploaded
supporting document. Submitting a record uploads the document first and
rolls the upload back when the record insert fails.
"""

__version__ = "1.0.0"
