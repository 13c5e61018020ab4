from __future__ import annotations

import os

# Follow sub folders of the base path when looking for symlinks.
# There is no loop detection, do not enable on trees containing symlink cycles.
allow_deep_symlinks = os.getenv('DEVELOP_ALLOW_DEEP_SYMLINKS', 'false').lower() == 'true'
