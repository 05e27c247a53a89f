"""Encoding detection utilities"""

import chardet


def detect_encoding(data: bytes) -> str:
    """
    Detect the text encoding of raw file bytes

    Args:
        data: File contents

    Returns:
        Detected encoding string
    """
    # Check for BOM
    if data.startswith(b'\xef\xbb\xbf'):
        return 'utf-8-sig'

    result = chardet.detect(data[:8192])
    if result['encoding'] and result['confidence'] > 0.7:
        return result['encoding']

    # Fallback: try common encodings (cp949 covers most Korean exports)
    for encoding in ['utf-8', 'cp949', 'euc-kr']:
        try:
            data[:4096].decode(encoding)
            return encoding
        except (UnicodeDecodeError, LookupError):
            continue

    return 'latin-1'
