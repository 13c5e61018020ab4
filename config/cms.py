from __future__ import annotations

import os
from typing import Any, Dict

# Restrict symlinked paths to targets inside the application base path
restrict_base_dir = os.getenv('CMS_RESTRICT_BASE_DIR', 'true').lower() == 'true'

# Storage used by file attachments
storage: Dict[str, Dict[str, Any]] = {
    'uploads': {
        'disk': os.getenv('CMS_UPLOADS_DISK', 'local'),
        'folder': 'uploads',
        'path': '/storage/app/uploads',
        'protected_path': '/storage/app/uploads/protected',
    },
}
