import logging
from typing import Optional

from flask import Flask, current_app, jsonify, request

from config import Settings, load_settings
from log_config import configure_logging
from points import check_scorable, score, score_breakdown, validate
from receipt import Receipt, ReceiptError
from storage import ReceiptNotFound, ReceiptStore

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[ReceiptStore] = None) -> Flask:
    """
    Builds the receipt processing application around an injected receipt store.
    A fresh in-memory store is created when none is given.
    """
    settings = settings or load_settings()
    flask_app = Flask(__name__)
    flask_app.config["STRICT_AMOUNTS"] = settings.strict_amounts
    flask_app.extensions["receipt_store"] = store if store is not None else ReceiptStore()

    @flask_app.errorhandler(ReceiptError)
    def handle_receipt_error(e: ReceiptError):
        log.info("rejected receipt input", extra={"path": request.path, "reason": str(e)})
        return jsonify({"error": str(e)}), 400

    @flask_app.errorhandler(ReceiptNotFound)
    def handle_not_found(e: ReceiptNotFound):
        log.info("receipt id not found", extra={"receipt_id": e.receipt_id})
        return jsonify({"error": str(e)}), 404

    @flask_app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"})

    @flask_app.route('/receipts/process', methods=['POST'])
    def process_receipt():
        """
        Router for receipt processing requests. The input JSON is validated and
        the receipt is kept in the store under a newly generated id, which is
        returned to the user. Points are calculated when they are requested.

        Returns:
            400 Error if input JSON is invalid
            200 OK and generated receipt id if input JSON is valid
        """
        receipt = Receipt.from_json(request.get_json(silent=True))
        validate(receipt)
        if current_app.config["STRICT_AMOUNTS"]:
            check_scorable(receipt)
        receipt_id = _store().add(receipt)
        log.info("receipt accepted", extra={"receipt_id": receipt_id, "retailer": receipt.retailer})
        return jsonify({"id": receipt_id})

    @flask_app.route('/receipts/<receipt_id>/points', methods=['GET'])
    def get_points(receipt_id):
        """
        Router for points requests. The input receipt id is used to look up its
        receipt in the store, and the receipt is scored.

        Returns:
            404 Error if the receipt id is not found
            400 Error if the stored receipt cannot be scored
            200 OK and the calculated points for the receipt
        """
        receipt = _store().get(receipt_id)
        points = score(receipt)
        if log.isEnabledFor(logging.DEBUG):
            log.debug("scored receipt", extra={"receipt_id": receipt_id, "breakdown": score_breakdown(receipt)})
        return jsonify({"points": points})

    return flask_app


def _store() -> ReceiptStore:
    return current_app.extensions["receipt_store"]


def main():
    settings = load_settings()
    configure_logging(service=settings.service, json_mode=settings.json_logs, level=settings.log_level)
    log.info("starting receipt service", extra={"host": settings.host, "port": settings.port})
    create_app(settings).run(host=settings.host, port=settings.port, threaded=settings.threaded)
    # threaded=True lets Flask handle requests concurrently, the store locks its own map


if __name__ == '__main__':
    main()
