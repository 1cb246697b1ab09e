#!/usr/bin/env python3
"""
Tests for the Flask demo application

Run: python -m pytest minibtree/tests/test_demo_app.py -v
"""

import os
import sys
import importlib.util
import unittest

ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, ROOT)

from minibtree import BTree


def load_demo_app():
    """Import demo_app/app.py, which is not part of the installed package"""
    path = os.path.join(ROOT, 'demo_app', 'app.py')
    spec = importlib.util.spec_from_file_location('minibtree_demo_app', path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


demo = load_demo_app()


class TestDemoApp(unittest.TestCase):
    """Test the JSON endpoints"""

    def setUp(self):
        self.tree = BTree(t=2)
        self.app = demo.create_app(self.tree)
        self.app.config['TESTING'] = True
        self.client = self.app.test_client()

    def test_index_stats(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data['min_degree'], 2)
        self.assertEqual(data['size'], 0)
        self.assertEqual(data['node_count'], 1)

    def test_insert_and_list(self):
        response = self.client.post('/keys', json={'keys': [3, 1, 2, 4]})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()['size'], 4)

        response = self.client.post('/keys', json={'key': -7})
        self.assertEqual(response.status_code, 201)

        response = self.client.get('/keys')
        self.assertEqual(response.get_json()['keys'], [-7, 1, 2, 3, 4])

    def test_insert_requires_key(self):
        response = self.client.post('/keys', json={})
        self.assertEqual(response.status_code, 400)

        response = self.client.post('/keys', json={'keys': 5})
        self.assertEqual(response.status_code, 400)

    def test_insert_invalid_key(self):
        response = self.client.post('/keys', json={'key': 'abc'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('integers', response.get_json()['error'])
        self.assertEqual(len(self.tree), 0)

    def test_insert_batch_is_all_or_nothing(self):
        response = self.client.post('/keys', json={'keys': [1, 2, 'x']})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.tree), 0)

        response = self.client.post('/keys', json={'keys': [1, True]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get('/keys').get_json()['keys'], [])

    def test_unique_batch_rejects_duplicates(self):
        self.client.post('/reset', json={'unique': True})
        self.client.post('/keys', json={'key': 5})

        response = self.client.post('/keys', json={'keys': [1, 5]})
        self.assertEqual(response.status_code, 400)
        response = self.client.post('/keys', json={'keys': [2, 3, 2]})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.client.get('/keys').get_json()['keys'], [5])

    def test_insert_non_object_body(self):
        response = self.client.post('/keys', json=5)
        self.assertEqual(response.status_code, 400)
        self.assertIn('JSON object', response.get_json()['error'])

        response = self.client.post('/keys', json=[1, 2])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.tree), 0)

    def test_search(self):
        self.tree.insert(5)
        response = self.client.get('/keys/5')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()['found'])

        response = self.client.get('/keys/6')
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.get_json()['found'])

    def test_search_negative_key(self):
        self.tree.insert(-3)
        response = self.client.get('/keys/-3')
        self.assertEqual(response.status_code, 200)

    def test_delete(self):
        self.tree.insert(5)
        response = self.client.delete('/keys/5')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['size'], 0)

        response = self.client.delete('/keys/5')
        self.assertEqual(response.status_code, 404)

    def test_levels(self):
        for key in (1, 2, 3, 4):
            self.tree.insert(key)
        response = self.client.get('/levels')
        self.assertEqual(response.get_json()['levels'], [[[2]], [[1], [3, 4]]])

    def test_reset(self):
        self.tree.insert(1)
        response = self.client.post('/reset', json={'t': 4})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()['min_degree'], 4)
        self.assertEqual(response.get_json()['size'], 0)

        response = self.client.post('/reset', json={'t': 1})
        self.assertEqual(response.status_code, 400)

    def test_reset_non_object_body(self):
        self.tree.insert(1)
        response = self.client.post('/reset', json=[1])
        self.assertEqual(response.status_code, 400)
        self.assertIn('JSON object', response.get_json()['error'])
        self.assertIs(self.app.config['TREE'], self.tree)
        self.assertEqual(len(self.tree), 1)

    def test_unique_reset_rejects_duplicates(self):
        self.client.post('/reset', json={'unique': True})
        self.client.post('/keys', json={'key': 1})
        response = self.client.post('/keys', json={'key': 1})
        self.assertEqual(response.status_code, 400)


if __name__ == '__main__':
    unittest.main(verbosity=2)
