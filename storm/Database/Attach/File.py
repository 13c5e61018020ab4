from __future__ import annotations

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Self, Union
from fastapi import UploadFile
from sqlalchemy import String, Text, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from storm.Config.Repository import config
from storm.Database.Model import Model
from storm.Filesystem import get_filesystem, get_filesystem_manager
from storm.Filesystem.FilesystemManager import FilesystemAdapter

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS: List[str] = ['jpg', 'jpeg', 'bmp', 'png', 'webp', 'gif', 'svg']


@dataclass
class ValidationFile:
    """A stored attachment presented to upload validation."""
    path: str
    name: str
    size: int
    content_type: str
    extension: str = ''

    def __post_init__(self) -> None:
        if not self.extension:
            self.extension = Path(self.name).suffix.lstrip('.').lower()


class File(Model):
    """
    File attachment.

    Bytes live on the uploads disk under ``<folder>/<public|protected>/``
    in a directory partitioned by the first nine characters of the random
    ``disk_name``. Attachments point back at their owner through
    ``attachment_type`` / ``attachment_id`` and the relation name in ``field``.
    """

    __tablename__ = 'system_files'

    disk_name: Mapped[str] = mapped_column(String(255))
    file_name: Mapped[str] = mapped_column(String(255))
    file_size: Mapped[int] = mapped_column(Integer)
    content_type: Mapped[str] = mapped_column(String(255))
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    field: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    attachment_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    attachment_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)
    sort_order: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __fillable__ = ['file_name', 'title', 'description', 'field', 'is_public', 'sort_order', 'data']

    # Contents waiting to be written on the next save
    _pending_contents = None

    def __repr__(self) -> str:
        return f"<File(id={self.id}, file_name={self.file_name!r})>"

    @property
    def data(self) -> Optional[bytes]:
        return self._pending_contents

    @data.setter
    def data(self, value: Union[UploadFile, str, Path]) -> None:
        if isinstance(value, UploadFile):
            self.from_data(value)
        else:
            self.from_file(value)

    def from_data(self, upload: UploadFile) -> Self:
        """Take the contents of an uploaded file."""
        upload.file.seek(0)
        contents = upload.file.read()
        file_name = upload.filename or 'upload'

        self.file_name = file_name
        self.content_type = upload.content_type or self._guess_content_type(file_name)
        return self._set_contents(contents)

    def from_file(self, path: Union[str, Path]) -> Self:
        """Take the contents of a local file."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        self.file_name = path.name
        self.content_type = self._guess_content_type(path.name)
        return self._set_contents(path.read_bytes())

    def _set_contents(self, contents: bytes) -> Self:
        self.file_size = len(contents)
        self.disk_name = self._generate_disk_name()
        self._pending_contents = contents
        return self

    def _generate_disk_name(self) -> str:
        extension = self.get_extension()
        name = uuid.uuid4().hex
        return f"{name}.{extension}" if extension else name

    @staticmethod
    def _guess_content_type(file_name: str) -> str:
        return mimetypes.guess_type(file_name)[0] or 'application/octet-stream'

    def save(self, session_key: Optional[str] = None) -> bool:
        if self._pending_contents is not None:
            if not self.get_disk().put(self.get_disk_path(), self._pending_contents):
                raise OSError(f"Unable to store {self.file_name} as {self.get_disk_path()}")
            self._pending_contents = None
        return super().save(session_key)

    def delete(self) -> bool:
        disk_path = self.get_disk_path() if self.disk_name else None
        if not super().delete():
            return False

        if disk_path is not None:
            self.get_disk().delete(disk_path)
            logger.debug(f"Deleted stored file {disk_path}")
        return True

    # Storage locations

    @staticmethod
    def get_uploads_config() -> Dict[str, Any]:
        return config('cms.storage.uploads', {})

    def get_disk(self) -> FilesystemAdapter:
        return get_filesystem_manager().disk(self.get_uploads_config().get('disk', 'local'))

    def get_partition_directory(self) -> str:
        name = self.disk_name
        return f"{name[0:3]}/{name[3:6]}/{name[6:9]}/"

    def get_storage_directory(self) -> str:
        folder = self.get_uploads_config().get('folder', 'uploads')
        return f"{folder}/{'public' if self.is_public_file() else 'protected'}/"

    def get_disk_path(self) -> str:
        return self.get_storage_directory() + self.get_partition_directory() + self.disk_name

    def get_public_path(self) -> str:
        uploads = self.get_uploads_config()
        base = uploads.get('path', '/storage/app/uploads')
        if self.is_public_file():
            return f"{base}/public/"
        return uploads.get('protected_path', f"{base}/protected").rstrip('/') + '/'

    def get_path(self) -> str:
        """URL path of the file."""
        return self.get_public_path() + self.get_partition_directory() + self.disk_name

    def get_local_path(self) -> str:
        return self.get_disk().path(self.get_disk_path())

    def get_contents(self) -> bytes:
        if self._pending_contents is not None:
            return self._pending_contents
        return self.get_disk().get(self.get_disk_path())

    def is_public_file(self) -> bool:
        # New files are public until told otherwise
        return self.is_public is not False

    def get_extension(self) -> str:
        return Path(self.file_name or '').suffix.lstrip('.').lower()

    def is_image(self) -> bool:
        return self.get_extension() in IMAGE_EXTENSIONS

    def size_to_string(self) -> str:
        return get_filesystem().size_to_string(self.file_size or 0)
