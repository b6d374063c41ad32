"""
utils/backup.py — Plant directory backups.

Archives the whole plants directory to a timestamped zip before any batch
job rewrites records.
Format: plants_YYYYMMDD_HHMMSS_{reason}.zip
"""

import logging
import os
import shutil
from datetime import datetime

from plant_store import get_plants_dir

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BACKUP_PREFIX = 'plants_'


def get_backup_dir():
    """Get the backup directory from environment or default."""
    return os.environ.get('BACKUP_DIR', os.path.join(BASE_DIR, 'backups'))


def backup_plants(reason='manual', plants_dir=None, backup_dir=None):
    """
    Zip the plants directory into the backup directory.

    Args:
        reason: Short tag for the backup trigger (e.g., 'manual', 'pre_ranges', 'pre_types').
        plants_dir: Directory to archive (defaults to the configured plants dir).
        backup_dir: Destination directory (defaults to the configured backup dir).

    Returns:
        The filename of the created archive, or None if there was nothing to
        back up or the archive could not be written.
    """
    plants_dir = plants_dir or get_plants_dir()
    backup_dir = backup_dir or get_backup_dir()

    if not os.path.isdir(plants_dir):
        return None
    os.makedirs(backup_dir, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    safe_reason = reason.replace(' ', '_').replace('/', '_')[:30]
    base_name = os.path.join(backup_dir, f'{BACKUP_PREFIX}{timestamp}_{safe_reason}')

    try:
        archive = shutil.make_archive(base_name, 'zip', root_dir=plants_dir)
    except OSError as e:
        logger.error("Backup of %s failed: %s", plants_dir, e)
        return None
    return os.path.basename(archive)


def list_backups(backup_dir=None):
    """
    List backup archives, newest first.

    Returns:
        List of dicts with keys: filename, timestamp, size_bytes, size_display, reason.
    """
    backup_dir = backup_dir or get_backup_dir()
    if not os.path.isdir(backup_dir):
        return []

    backups = []
    for f in os.listdir(backup_dir):
        if not (f.startswith(BACKUP_PREFIX) and f.endswith('.zip')):
            continue
        size_bytes = os.stat(os.path.join(backup_dir, f)).st_size

        # Format: plants_YYYYMMDD_HHMMSS_reason.zip
        parts = f[:-len('.zip')].split('_')
        timestamp_str = ''
        reason = ''
        if len(parts) >= 3:
            date_part, time_part = parts[1], parts[2]
            timestamp_str = (f'{date_part[:4]}-{date_part[4:6]}-{date_part[6:8]} '
                             f'{time_part[:2]}:{time_part[2:4]}:{time_part[4:6]}')
            reason = '_'.join(parts[3:])

        if size_bytes < 1024:
            size_display = f'{size_bytes} B'
        elif size_bytes < 1024 * 1024:
            size_display = f'{size_bytes / 1024:.1f} KB'
        else:
            size_display = f'{size_bytes / (1024 * 1024):.1f} MB'

        backups.append({
            'filename': f,
            'timestamp': timestamp_str,
            'size_bytes': size_bytes,
            'size_display': size_display,
            'reason': reason,
        })

    backups.sort(key=lambda b: b['filename'], reverse=True)
    return backups
