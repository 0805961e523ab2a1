from __future__ import annotations

# gh API calls and single asset uploads
GH_TIMEOUT_SECONDS = 60.0
GH_UPLOAD_TIMEOUT_SECONDS = 15 * 60.0

# rustup target installation
RUSTUP_TIMEOUT_SECONDS = 10 * 60.0
