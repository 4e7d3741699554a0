import platform
import os
import stat
import logging

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import ntsecuritycon
        import win32api
        import win32security
        WINDOWS_SECURITY_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not fully installed, cannot set Windows file permissions securely.")
        WINDOWS_SECURITY_AVAILABLE = False
else:
    WINDOWS_SECURITY_AVAILABLE = False


def _owner_only_dacl():
    user_sid, _, _ = win32security.LookupAccountName(None, win32api.GetUserName())
    dacl = win32security.ACL()
    dacl.AddAccessAllowedAce(
        win32security.ACL_REVISION,
        ntsecuritycon.FILE_GENERIC_READ | ntsecuritycon.FILE_GENERIC_WRITE,
        user_sid
    )
    return dacl


def restrict_to_owner(filepath: str) -> bool:
    """Make a file readable/writable by its owner only. Returns False on failure."""
    if platform.system() != 'Windows':
        try:
            os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)  # 600
        except OSError as e:
            logger.error(f"Failed to chmod {filepath}: {e}")
            return False
        return True

    if not WINDOWS_SECURITY_AVAILABLE:
        logger.warning(f"Skipping owner-only ACL for {filepath}: pywin32 not available.")
        return False
    try:
        # Protected DACL drops ACEs inherited from the config directory
        win32security.SetNamedSecurityInfo(
            filepath,
            win32security.SE_FILE_OBJECT,
            win32security.DACL_SECURITY_INFORMATION | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
            None,
            None,
            _owner_only_dacl(),
            None
        )
    except win32api.error as e:
        logger.error(f"Failed to set owner-only ACL on {filepath}: {e}")
        return False
    return True


def mask_secret(value: str, visible: int = 4) -> str:
    """Show only the last few characters of a secret."""
    if not value:
        return ""
    if len(value) <= visible:
        return "•" * len(value)
    return "•" * 8 + value[-visible:]
