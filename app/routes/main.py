from flask import Blueprint, current_app, jsonify, render_template, request
import logging
from services.config_bridge import get_cfg
from services.waste.formatting import (
    NEAREST_LABEL,
    format_date_cz,
    results_to_json,
    stream_category,
    truncate,
)
from services.waste.resolver import resolve
from services.waste.weeks import local_today


# Create Blueprint
main_routes_bp = Blueprint('main_routes', __name__)

# Get logger
logger = logging.getLogger(__name__)


def _lookup(query: str):
    store = current_app.extensions['rule_store']
    policy = current_app.extensions['resolver_policy']
    today = local_today(current_app.config['TIMEZONE'])
    return store, resolve(query, store, today=today, policy=policy)


@main_routes_bp.route('/')
def homepage():
    query = request.args.get('q', '')
    store, results = _lookup(query)
    policy = current_app.extensions['resolver_policy']
    return render_template(
        'home.html',
        query=query,
        validity=store.validity,
        results=results,
        searched=len(query.strip()) >= policy.min_query_length,
        description_max=get_cfg('description_max_length', default=60),
        format_date=format_date_cz,
        category=stream_category,
        truncate=truncate,
        nearest_label=NEAREST_LABEL,
    )


@main_routes_bp.route('/api/lookup')
def api_lookup():
    query = request.args.get('q', '')
    store, results = _lookup(query)
    return jsonify(results_to_json(query, store.validity, results))


@main_routes_bp.route('/health')
def health():
    store = current_app.extensions['rule_store']
    return jsonify({
        "status": "ok",
        "areas": len(store.areas),
        "validity": store.validity,
    })
