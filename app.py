import io
import logging
import os

import matplotlib
matplotlib.use('Agg')

from flask import Flask, jsonify, request, send_file

import QRcode
from exceptions import CapacityOverflowError

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = os.environ.get('QR_DEFAULT_LEVEL', 'M')

app = Flask(__name__)


class BadRequest(ValueError):
    pass


def make_qrcode(req):
    data = req.args.get('data')
    if not data:
        raise BadRequest("missing 'data' parameter")

    try:
        q = QRcode.QRcode(err_corr=req.args.get('level', DEFAULT_LEVEL),
                          border=int(req.args.get('border', 4)))
    except ValueError as e:
        raise BadRequest(str(e)) from e

    q.add_data(data)
    q.make()
    return q


@app.errorhandler(BadRequest)
def handle_bad_request(e):
    logger.info("rejected request: %s", e)
    return jsonify(error=str(e)), 400


@app.errorhandler(CapacityOverflowError)
def handle_overflow(e):
    logger.info("rejected request: %s", e)
    return jsonify(error=str(e)), 413


@app.route('/qr.json', methods=['GET'])
def qr_json():
    q = make_qrcode(request)
    return jsonify(
        version=q.version,
        mask_pattern=q.mask_used,
        size=q.get_module_count(),
        modules=q.modules,
    )


@app.route('/qr.png', methods=['GET'])
def qr_png():
    q = make_qrcode(request)
    buf = io.BytesIO()
    q.save_image(buf)
    buf.seek(0)
    return send_file(buf, mimetype='image/png')


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=os.environ.get('QR_APP_DEBUG', '') == '1',
            port=int(os.environ.get('QR_APP_PORT', 8081)))
