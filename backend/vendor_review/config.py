import os

# Vendor Review Configuration
class Config:
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "temp_uploads")
    OUTPUT_FOLDER = os.environ.get("OUTPUT_FOLDER", "outputs")
    ALLOWED_EXTENSIONS = {'csv'}
    MAX_UPLOAD_MB = float(os.environ.get("MAX_UPLOAD_MB", "25"))
    # Saved zip bundles older than this are removed on the next upload
    OUTPUT_RETENTION_HOURS = float(os.environ.get("OUTPUT_RETENTION_HOURS", "24"))

    # Vendors whose average interchange rate (percent) is strictly above this are approved
    APPROVAL_THRESHOLD_PCT = float(os.environ.get("APPROVAL_THRESHOLD_PCT", "0.3"))

    UNKNOWN_VENDOR = "Unknown Vendor"
    DEBIT_DIRECTION = "Debit"

    # Always classified as problem vendors, whatever their interchange rate.
    # Giromex and SendWave are never produced by the recognition table.
    ALWAYS_PROBLEM_VENDORS = [
        'Giromex',
        'Pangea',
        'Remitly',
        'SendWave',
        'WorldRemit',
        'Western Union',
        'Xoom',
    ]
