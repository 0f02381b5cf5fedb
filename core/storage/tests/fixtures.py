"""
Helpers for building uploaded files in tests.
"""
from django.core.files.uploadedfile import SimpleUploadedFile

# 1x1 transparent PNG
PNG_BYTES = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01'
    b'\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f'
    b'\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82'
)


def create_image_file(name='bill.png', content_type='image/png', content=PNG_BYTES):
    return SimpleUploadedFile(name, content, content_type=content_type)


def create_text_file(name='notes.txt'):
    return SimpleUploadedFile(name, b'not an image', content_type='text/plain')
