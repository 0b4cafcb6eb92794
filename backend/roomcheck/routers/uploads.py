"""Shared handling of multipart image uploads."""

from typing import List, Optional

from fastapi import UploadFile

from roomcheck.services.uploads import ImageFile


async def read_images(files: Optional[List[UploadFile]], max_size_mb: Optional[int] = None) -> List[ImageFile]:
    return [await ImageFile.from_upload(f, max_size_mb) for f in files or []]
