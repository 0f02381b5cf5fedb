"""
Image uploads to object storage (Django's ``default_storage``).

    from core.storage.services import upload_image, delete_image, UploadError
"""
