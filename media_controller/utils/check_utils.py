import shutil
from ..constants import REQUIRED_EXECUTABLES

def check_dependencies():
    missing = [exe for exe in REQUIRED_EXECUTABLES if shutil.which(exe) is None]
    if missing:
        # Not fatal: every play attempt will report a SpawnError instead
        print(f"⚠️ Missing required dependencies: {', '.join(missing)}")
        return missing
    print("✅ All required dependencies are present.")
    return missing
