"""
Attachment usage tracking and upload extension validation for Django.
"""
