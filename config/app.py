from __future__ import annotations

import os

# Application name, used by log channels and generated config headers
name = os.getenv('APP_NAME', 'Storm')

# Application environment
env = os.getenv('APP_ENV', 'production')

# Base path of the application. Symlink discovery and local path checks are
# restricted to this directory.
base_path = os.getenv('APP_BASE_PATH', os.getcwd())

# Public (web root) path, used to translate local paths to public URLs
public_path = os.getenv('APP_PUBLIC_PATH', os.path.join(base_path, 'public'))

# Storage path for uploads, logs and other generated files
storage_path = os.getenv('APP_STORAGE_PATH', os.path.join(base_path, 'storage'))
