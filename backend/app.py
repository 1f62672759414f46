from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
import os
import base64
import time
import traceback
from datetime import datetime
import logging

# Setup Logging
log_file = os.environ.get('LOG_FILE', 'server.log')
logging.basicConfig(
    filename=log_file,
    level=logging.DEBUG,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logging.info("Server starting up...")

# Allow `python backend/app.py` as well as `flask --app backend.app`
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from backend.vendor_review.pipeline import VendorReviewPipeline
from backend.vendor_review.config import Config
from backend.vendor_review.load import XLSX_MIME, CSV_MIME


app = Flask(__name__)
cors_origins = os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',')
CORS(app, resources={r"/*": {"origins": cors_origins}})

app.config['UPLOAD_FOLDER'] = os.path.join(os.getcwd(), Config.UPLOAD_FOLDER)
app.config['OUTPUT_FOLDER'] = os.path.join(os.getcwd(), Config.OUTPUT_FOLDER)

review_pipeline = VendorReviewPipeline()

# Engine stat keys -> response keys expected by the upload page
STAT_KEYS = {
    "total_transactions": "totalTransactions",
    "approved_customers": "approvedCustomers",
    "problem_customers": "problemCustomers",
    "total_vendors": "totalVendors",
    "filtered_out_non_remittance": "filteredOutNonRemittance",
}


def _data_uri(buffer, mime: str) -> str:
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:{mime};base64,{encoded}"


def _prune_outputs(folder: str, max_age_seconds: float) -> None:
    """Remove saved zip bundles older than max_age_seconds."""
    cutoff = time.time() - max_age_seconds
    for name in os.listdir(folder):
        path = os.path.join(folder, name)
        if name.endswith(".zip") and os.path.isfile(path) and os.path.getmtime(path) < cutoff:
            os.remove(path)
            logging.info(f"Removed expired bundle {name}")


@app.route('/api/process', methods=['POST'])
def process_file():
    file = request.files.get('file')
    if file is None or file.filename == '':
        return jsonify({"error": "No file provided"}), 400

    file_ext = file.filename.rsplit('.', 1)[-1].lower() if '.' in file.filename else ''
    if file_ext not in Config.ALLOWED_EXTENSIONS:
        return jsonify({"error": f"Unsupported file type: .{file_ext}"}), 400

    target_format = request.form.get('target_format', 'xlsx')
    if target_format not in ('xlsx', 'csv'):
        return jsonify({"error": f"Unsupported output format: {target_format}"}), 400

    # ─── 1. Size Validation ───
    file.seek(0, os.SEEK_END)
    file_size_mb = file.tell() / (1024 * 1024)
    file.seek(0)

    if file_size_mb > Config.MAX_UPLOAD_MB:
        return jsonify({"error": f"File too large ({file_size_mb:.1f}MB). Max is {Config.MAX_UPLOAD_MB:g}MB."}), 400

    # ─── 2. Save upload ───
    upload_folder = app.config['UPLOAD_FOLDER']
    output_folder = app.config['OUTPUT_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)
    os.makedirs(output_folder, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    safe_filename = f"{timestamp}_{os.path.basename(file.filename).replace(' ', '_')}"
    temp_path = os.path.join(upload_folder, safe_filename)
    file.save(temp_path)

    try:
        result = review_pipeline.run(temp_path, file_ext, target_format)
    except Exception:
        logging.error(f"Processing Error: {traceback.format_exc()}")
        result = None
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

    if not result or not result["success"]:
        logging.error(f"Error processing file {file.filename}: {result.get('error') if result else 'no result'}")
        return jsonify({"error": "Failed to process file"}), 500

    # ─── 3. Save bundle for download ───
    _prune_outputs(output_folder, Config.OUTPUT_RETENTION_HOURS * 3600)
    zip_name = f"{timestamp}_{result['zip_file_name']}"
    with open(os.path.join(output_folder, zip_name), 'wb') as f:
        f.write(result["zip_buffer"].getvalue())

    mime = XLSX_MIME if target_format == 'xlsx' else CSV_MIME
    outputs = result["outputs"]
    stats = result["stats"]

    return jsonify({
        "success": True,
        "downloadLinks": [_data_uri(buf, mime) for buf in outputs.values()],
        "fileNames": list(outputs.keys()),
        "zipFileName": result["zip_file_name"],
        "downloadUrl": f"/download/{zip_name}",
        "stats": {camel: stats[key] for key, camel in STAT_KEYS.items()},
    })


@app.route('/download/<filename>', methods=['GET'])
def download_file(filename):
    path = os.path.join(app.config['OUTPUT_FOLDER'], os.path.basename(filename))
    if os.path.exists(path):
        return send_file(path, as_attachment=True)
    return jsonify({"error": "File not found"}), 404


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=os.environ.get('FLASK_DEBUG', 'False') == 'True')
