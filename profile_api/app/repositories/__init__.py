"""
Data-access layer over the profiles collection.

Repositories translate operations on logical sub-resources into
single-document MongoDB reads and writes.
"""
