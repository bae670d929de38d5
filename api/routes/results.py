# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Quiz result endpoints.
"""

from flask import current_app, jsonify
from flask_openapi3 import APIBlueprint, Tag
from pymongo import DESCENDING
import logging

from domain.officers import build_result
from middleware.validation import validate_json
from models.entities import Result
from models.requests import SubmitResultRequest
from services.mongodb import RESULTS

logger = logging.getLogger(__name__)

results_tag = Tag(name="Results", description="Quiz results")
results_bp = APIBlueprint('results', __name__, abp_tags=[results_tag])


@results_bp.post('/submit-result')
@validate_json(SubmitResultRequest)
def submit_result(submission: SubmitResultRequest):
    """Store a quiz result."""
    result = build_result(submission)
    result_id = current_app.mongodb_service.create(RESULTS, result.to_document())

    logger.info(
        "Result submitted",
        extra={"username": result.username, "result_id": result_id, "score": result.score}
    )
    return jsonify({"message": "Result submitted successfully"})


@results_bp.get('/get-results')
def get_results():
    """List all quiz results, newest first."""
    result_docs = current_app.mongodb_service.find_all(
        RESULTS,
        sort_by="date",
        sort_order=DESCENDING
    )
    return jsonify([Result.from_document(doc).to_public() for doc in result_docs])
