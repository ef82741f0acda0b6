import csv
import io
import logging
import os

from flask import Flask, Response, jsonify, request

from loan_compare.calculator import build_parameters, calculate_parameters, compare_results
from loan_compare.config import log_level_from_env
from loan_compare.data_models import RepaymentPolicy, record_to_dict, result_to_dict
from loan_compare.formatter import schedule_rows
from loan_compare.utils import to_decimal
from loan_compare.validation import validate_inputs

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")


class InvalidLoanInput(Exception):
    """Raised when request values fail the input range checks."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


@app.errorhandler(InvalidLoanInput)
def _invalid_input(exc: InvalidLoanInput):
    logger.info("Rejected loan input: %s", exc)
    return jsonify({"errors": exc.errors}), 400


def _payload() -> dict:
    """Return request values from a JSON body or a submitted form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _payload_to_parameters(data: dict):
    """Validate a loan description and turn it into ``LoanParameters``.

    Expected keys are ``principal``, ``rate``, ``term``, optional ``grace``
    and ``type``. Unknown types fall back to equal payments.
    """
    policy = RepaymentPolicy.from_tag(data.get("type"))
    principal = data.get("principal")
    rate = data.get("rate")
    term = data.get("term")
    grace = data.get("grace", 0) if policy.is_grace else 0
    check = validate_inputs(principal, rate, term, grace)
    if not check.valid:
        raise InvalidLoanInput(check.errors)
    return build_parameters(policy, principal, rate, int(to_decimal(term)), int(to_decimal(grace)))


@app.get("/api/policies")
def list_policies():
    return jsonify([{"type": p.value, "label": p.label, "grace": p.is_grace} for p in RepaymentPolicy])


@app.post("/api/validate")
def validate():
    data = _payload()
    policy = RepaymentPolicy.from_tag(data.get("type"))
    grace = data.get("grace", 0) if policy.is_grace else 0
    check = validate_inputs(data.get("principal"), data.get("rate"), data.get("term"), grace)
    return jsonify({"valid": check.valid, "errors": check.errors})


@app.post("/api/calculate")
def calculate():
    params = _payload_to_parameters(_payload())
    result = calculate_parameters(params)
    return jsonify(result_to_dict(result))


@app.post("/api/schedule")
def schedule():
    params = _payload_to_parameters(_payload())
    result = calculate_parameters(params, include_schedule=True)
    return jsonify(
        {
            "summary": {k: v for k, v in result_to_dict(result).items() if k != "schedule"},
            "schedule": [record_to_dict(r) for r in result.schedule or []],
        }
    )


@app.post("/api/schedule.csv")
def schedule_csv():
    params = _payload_to_parameters(_payload())
    result = calculate_parameters(params, include_schedule=True)
    buffer = io.StringIO()
    # BOM so spreadsheet applications detect UTF-8
    buffer.write("\ufeff")
    csv.writer(buffer).writerows(schedule_rows(result.schedule or [], result.summary))
    filename = f"schedule_{params.policy.value}.csv"
    return Response(
        buffer.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.post("/api/compare")
def compare():
    data = _payload()
    loan_a = data.get("loan_a")
    loan_b = data.get("loan_b")
    if not isinstance(loan_a, dict) or not isinstance(loan_b, dict):
        raise InvalidLoanInput(["Both loan_a and loan_b must be provided."])
    result_a = calculate_parameters(_payload_to_parameters(loan_a))
    result_b = calculate_parameters(_payload_to_parameters(loan_b))
    comparison = compare_results(result_a, result_b)
    return jsonify(
        {
            "loan_a": result_to_dict(result_a),
            "loan_b": result_to_dict(result_b),
            "monthly_payment_diff": int(comparison.monthly_payment_diff),
            "total_interest_diff": int(comparison.total_interest_diff),
            "total_payment_diff": int(comparison.total_payment_diff),
            "higher_interest": comparison.higher_interest,
        }
    )


if __name__ == "__main__":
    logging.basicConfig(level=log_level_from_env("INFO"))
    print("Starting loan comparison web app...")
    app.run(host="0.0.0.0", port=8710, debug=True)
