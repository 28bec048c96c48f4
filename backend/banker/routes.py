from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    coordinator = current_app.extensions['banker']
    return jsonify({'status': 'ok', 'rooms': len(coordinator.registry)})

@main.route('/health')
def health():
    return jsonify({'status': 'healthy'})
