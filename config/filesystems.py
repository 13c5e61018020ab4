from __future__ import annotations

import os
from typing import Any, Dict

# Default filesystem disk
default = os.getenv('FILESYSTEM_DISK', 'local')

# Filesystem disks configuration
disks: Dict[str, Dict[str, Any]] = {
    'local': {
        'driver': 'local',
        'root': 'storage/app',
    },

    'public': {
        'driver': 'local',
        'root': 'public',
        'url': '/',
    },
}

# Default permission masks applied to written files and created folders,
# as octal strings ("644", "755"). Leave empty to keep the process umask.
default_file_mask = os.getenv('FILESYSTEM_FILE_MASK', '')
default_folder_mask = os.getenv('FILESYSTEM_FOLDER_MASK', '')

# Upload limits used to resolve the maximum accepted upload size
upload_max_filesize = os.getenv('UPLOAD_MAX_FILESIZE', '2M')
post_max_size = os.getenv('POST_MAX_SIZE', '8M')
