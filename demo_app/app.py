#!/usr/bin/env python3
"""
Demo Web Application - B-Tree Explorer

A small JSON API that exposes one MiniBTree instance, so the tree can be
driven from curl or a browser.

Endpoints:
- GET    /               tree statistics
- GET    /keys           all keys in ascending order
- POST   /keys           insert {"key": 5} or {"keys": [1, 2, 3]}
- GET    /keys/<key>     look a key up
- DELETE /keys/<key>     delete a key
- GET    /levels         keys of every node, level by level
- POST   /reset          start over, optionally with {"t": 4}

Run:
    pip install flask
    python app.py

Then visit: http://localhost:5000
"""

import os
import sys
import logging
from flask import Flask, request, jsonify

# Add parent directory to path to import minibtree
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from minibtree import BTree, BTreeError, InvalidConfiguration, DeleteResult


def create_app(tree=None):
    """Create the Flask app around tree (a new t=3 tree by default)."""
    app = Flask(__name__)
    app.config['TREE'] = tree if tree is not None else BTree(t=3)

    def current_tree():
        return app.config['TREE']

    @app.errorhandler(BTreeError)
    def handle_tree_error(error):
        return jsonify({'error': str(error)}), 400

    @app.route('/')
    def index():
        """Tree statistics."""
        return jsonify(current_tree().stats().to_dict())

    @app.route('/keys', methods=['GET'])
    def list_keys():
        return jsonify({'keys': current_tree().keys()})

    @app.route('/keys', methods=['POST'])
    def add_keys():
        """Insert one key or a list of keys; nothing is inserted if any key is rejected."""
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        if 'keys' in data:
            keys = data['keys']
        elif 'key' in data:
            keys = [data['key']]
        else:
            return jsonify({'error': 'Provide "key" or "keys"'}), 400

        if not isinstance(keys, list):
            return jsonify({'error': '"keys" must be a list'}), 400

        tree = current_tree()
        tree.insert_many(keys)
        app.logger.debug("inserted %d key(s)", len(keys))
        return jsonify({'inserted': keys, 'size': len(tree)}), 201

    @app.route('/keys/<int(signed=True):key>', methods=['GET'])
    def get_key(key):
        found = current_tree().search(key)
        return jsonify({'key': key, 'found': found}), (200 if found else 404)

    @app.route('/keys/<int(signed=True):key>', methods=['DELETE'])
    def delete_key(key):
        tree = current_tree()
        if tree.delete(key) is DeleteResult.KEY_NOT_FOUND:
            return jsonify({'error': f'Key {key} not found'}), 404
        return jsonify({'deleted': key, 'size': len(tree)})

    @app.route('/levels')
    def get_levels():
        return jsonify({'levels': current_tree().levels()})

    @app.route('/reset', methods=['POST'])
    def reset():
        """Replace the tree with an empty one."""
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        t = data.get('t', current_tree().t)
        try:
            app.config['TREE'] = BTree(t=t, unique=bool(data.get('unique', False)))
        except InvalidConfiguration as e:
            return jsonify({'error': str(e)}), 400
        return jsonify(current_tree().stats().to_dict())

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    app.run(debug=True, port=5000)
