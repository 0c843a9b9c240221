"""
Statement Extraction Review Service

A Flask-based JSON service for reviewing transactions extracted from OCR/AI
statement text. Runs text or uploaded statement files through the extraction
pipeline and returns the transactions with confidence scores and a summary,
so low-confidence extractions can be checked before they are stored.

This service is read-only: nothing is persisted.
"""

import csv
import io
import json
import os
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List

from flask import Flask, request, jsonify, send_file
from werkzeug.utils import secure_filename

from statement_engine import (
    StatementExtractor,
    merge_enhancement,
    find_duplicate_transactions,
    describe_duplicate_reason,
)
from statement_batch_processor import StatementDecodeError, decode_statement_bytes


app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 50 * 1024 * 1024  # 50MB max upload

# Stateless, safe to share between requests
extractor = StatementExtractor()

EXPORT_FIELDS = [
    'source', 'date', 'description', 'amount', 'type', 'category', 'confidence',
]


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() == 'txt'


def extract_text(text: str, source: str) -> Dict[str, Any]:
    """
    Run one statement text through the extraction pipeline.

    Args:
        text: Raw statement text
        source: Label copied onto each result row (file name or "request")

    Returns:
        Dictionary with result rows, the quality report and a fallback flag
    """
    result = extractor.extract(text)
    rows = []
    for txn in result.transactions:
        row = txn.to_dict()
        row['source'] = source
        rows.append(row)
    return {
        'results': rows,
        'quality': result.quality_report.to_dict(),
        'used_fallback': result.used_fallback,
    }


def generate_summary(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Generate aggregate summary statistics from extraction results.

    Args:
        results: List of transaction result rows

    Returns:
        Dictionary with summary statistics
    """
    summary = {
        'total_transactions': len(results),
        'by_category': defaultdict(int),
        'by_type': defaultdict(int),
        'by_confidence_level': {
            'high': 0,      # >= 0.80
            'medium': 0,    # 0.60 - 0.79
            'low': 0,       # < 0.60
        },
        'income_total': 0.0,
        'expense_total': 0.0,
        'low_confidence_transactions': [],
    }

    for result in results:
        summary['by_category'][result['category']] += 1
        summary['by_type'][result['type']] += 1

        if result['type'] == 'income':
            summary['income_total'] += result['amount']
        else:
            summary['expense_total'] += result['amount']

        # Confidence level buckets
        confidence = result['confidence']
        if confidence >= 0.80:
            summary['by_confidence_level']['high'] += 1
        elif confidence >= 0.60:
            summary['by_confidence_level']['medium'] += 1
        else:
            summary['by_confidence_level']['low'] += 1
            # Track low confidence transactions for review
            summary['low_confidence_transactions'].append({
                'date': result['date'],
                'description': result['description'],
                'amount': result['amount'],
                'category': result['category'],
                'confidence': confidence,
            })

    summary['income_total'] = round(summary['income_total'], 2)
    summary['expense_total'] = round(summary['expense_total'], 2)

    # Convert defaultdicts to regular dicts for JSON serialization
    summary['by_category'] = dict(summary['by_category'])
    summary['by_type'] = dict(summary['by_type'])

    return summary


@app.route('/health')
def health():
    """Liveness probe."""
    return jsonify({'status': 'ok'})


@app.route('/extract', methods=['POST'])
def extract():
    """
    Extract transactions from statement text.

    Expects JSON body with a 'text' field. Optional fields:
    - 'enhanced_text': an enhancement collaborator answer merged as a second pass
    - 'existing_transactions': stored transactions checked for re-imports
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or 'text' not in data:
        app.logger.warning("Extract: No text provided in request")
        return jsonify({'error': 'No text provided'}), 400

    text = data['text']
    if not isinstance(text, str):
        return jsonify({'error': 'Text must be a string'}), 400

    result = extractor.extract(text)
    enhanced_text = data.get('enhanced_text')
    if isinstance(enhanced_text, str) and enhanced_text.strip():
        result = merge_enhancement(result, enhanced_text, extractor)

    rows = []
    for txn in result.transactions:
        row = txn.to_dict()
        row['source'] = 'request'
        rows.append(row)

    response = {
        'success': True,
        'total_transactions': len(rows),
        'results': rows,
        'quality': result.quality_report.to_dict(),
        'used_fallback': result.used_fallback,
        'summary': generate_summary(rows),
    }

    existing = data.get('existing_transactions')
    if isinstance(existing, list) and not result.used_fallback:
        report = find_duplicate_transactions(result.transactions, existing, extractor.config)
        response['duplicates'] = [
            {
                'transaction': check.new_transaction.to_dict(),
                'existing_transaction': check.existing_transaction,
                'confidence': check.confidence,
                'reason': describe_duplicate_reason(check),
            }
            for check in report.duplicates
        ]
        response['duplicate_summary'] = report.summary

    return jsonify(response)


@app.route('/upload', methods=['POST'])
def upload_files():
    """
    Handle multiple statement text uploads and extract transactions.

    Returns JSON with extraction results and summary statistics.
    """
    if 'files' not in request.files:
        return jsonify({'error': 'No files provided'}), 400

    files = request.files.getlist('files')

    if not files or all(f.filename == '' for f in files):
        return jsonify({'error': 'No files selected'}), 400

    all_results = []
    file_summaries = []
    errors = []

    for file in files:
        if file and file.filename and allowed_file(file.filename):
            filename = secure_filename(file.filename)

            try:
                text = decode_statement_bytes(file.read())
                if not text.strip():
                    raise ValueError("Statement file is empty")
                extracted = extract_text(text, filename)
                all_results.extend(extracted['results'])

                file_summaries.append({
                    'filename': filename,
                    'transaction_count': 0 if extracted['used_fallback'] else len(extracted['results']),
                    'quality_score': extracted['quality']['score'],
                    'used_fallback': extracted['used_fallback'],
                    'status': 'success'
                })

            except (StatementDecodeError, ValueError) as e:
                app.logger.warning(f"Upload: failed to process {filename}: {e}")
                errors.append({
                    'filename': filename,
                    'error': str(e)
                })
        else:
            if file and file.filename:
                errors.append({
                    'filename': file.filename,
                    'error': 'Invalid file type. Only TXT files are allowed.'
                })

    if not all_results and errors:
        return jsonify({'error': 'All files failed to process', 'details': errors}), 400

    summary = generate_summary(all_results)

    response = {
        'success': True,
        'files_processed': len(file_summaries),
        'file_summaries': file_summaries,
        'total_transactions': len(all_results),
        'results': all_results,
        'summary': summary,
        'errors': errors if errors else None,
    }

    return jsonify(response)


@app.route('/export/csv', methods=['POST'])
def export_csv():
    """
    Export extraction results to CSV format.

    Expects JSON body with 'results' field containing extraction results.
    """
    try:
        data = request.get_json(silent=True)

        if not isinstance(data, dict) or 'results' not in data:
            app.logger.warning("CSV export: No results provided in request")
            return jsonify({'error': 'No results provided'}), 400

        results = data['results']

        if not isinstance(results, list):
            app.logger.error(f"CSV export: Results is not a list, got {type(results)}")
            return jsonify({'error': 'Results must be an array'}), 400

        if not all(isinstance(result, dict) for result in results):
            app.logger.warning("CSV export: Results contain non-object rows")
            return jsonify({'error': 'Results must be objects'}), 400

        # Create CSV in memory
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=EXPORT_FIELDS,
                                restval='', extrasaction='ignore')

        writer.writeheader()
        for result in results:
            writer.writerow(result)

        csv_data = output.getvalue().encode('utf-8')

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'extraction_results_{timestamp}.csv'

        app.logger.info(f"CSV export: Successfully exported {len(results)} results")

        return send_file(
            io.BytesIO(csv_data),
            mimetype='text/csv',
            as_attachment=True,
            download_name=filename
        )
    except Exception as e:
        app.logger.error(f"CSV export error: {str(e)}", exc_info=True)
        return jsonify({'error': f'Failed to export CSV: {str(e)}'}), 500


@app.route('/export/json', methods=['POST'])
def export_json():
    """
    Export extraction results to JSON format.

    Expects JSON body with 'results' field containing extraction results.
    """
    try:
        data = request.get_json(silent=True)

        if not isinstance(data, dict) or 'results' not in data:
            app.logger.warning("JSON export: No results provided in request")
            return jsonify({'error': 'No results provided'}), 400

        results = data['results']

        if not isinstance(results, list):
            app.logger.error(f"JSON export: Results is not a list, got {type(results)}")
            return jsonify({'error': 'Results must be an array'}), 400

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'extraction_results_{timestamp}.json'

        json_data = json.dumps(results, indent=2).encode('utf-8')

        app.logger.info(f"JSON export: Successfully exported {len(results)} results")

        return send_file(
            io.BytesIO(json_data),
            mimetype='application/json',
            as_attachment=True,
            download_name=filename
        )
    except Exception as e:
        app.logger.error(f"JSON export error: {str(e)}", exc_info=True)
        return jsonify({'error': f'Failed to export JSON: {str(e)}'}), 500


if __name__ == '__main__':
    print("=" * 80)
    print("Statement Extraction Review Service")
    print("=" * 80)
    print("\nStarting service on http://localhost:5001")
    print("\nPress Ctrl+C to stop the server.")
    print("=" * 80)

    # Set FLASK_DEBUG=1 only in development environments
    debug_mode = os.environ.get('FLASK_DEBUG', '0') == '1'
    app.run(debug=debug_mode, port=5001, host='0.0.0.0')
