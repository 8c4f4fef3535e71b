import json

import pytest

from app.models import Review


def _review(client, headers, resource_id, **body):
    return client.post(
        f'/reviews/{resource_id}',
        data=json.dumps(body),
        content_type='application/json',
        headers=headers,
    )


class TestCreateReview:
    """POST /reviews/<resource_id>"""

    def test_create_review(self, client, student_headers, make_resource):
        resource = make_resource()
        resp = _review(client, student_headers, resource.id, rating=4, comment='Clear and well paced')
        assert resp.status_code == 201
        review = resp.get_json()['review']
        assert review['rating'] == 4
        assert review['comment'] == 'Clear and well paced'
        assert review['user_name'] == 'Test User'

    def test_legacy_review_key(self, client, student_headers, make_resource):
        resource = make_resource()
        resp = _review(client, student_headers, resource.id, rating=5, review='Great')
        assert resp.get_json()['review']['comment'] == 'Great'

    def test_comment_is_optional(self, client, student_headers, make_resource):
        resource = make_resource()
        resp = _review(client, student_headers, resource.id, rating=3)
        assert resp.status_code == 201
        assert resp.get_json()['review']['comment'] is None

    def test_second_review_conflicts(self, client, student_headers, make_resource):
        resource = make_resource()
        assert _review(client, student_headers, resource.id, rating=4).status_code == 201
        resp = _review(client, student_headers, resource.id, rating=2)
        assert resp.status_code == 409
        assert Review.query.count() == 1

    @pytest.mark.parametrize('rating', [0, 6, -3, 'five', 4.5, '4', True])
    def test_rating_out_of_range_returns_400(self, client, student_headers, make_resource, rating):
        resource = make_resource()
        resp = _review(client, student_headers, resource.id, rating=rating)
        assert resp.status_code == 400
        assert Review.query.count() == 0

    def test_unknown_resource_returns_404(self, client, student_headers):
        assert _review(client, student_headers, 'nonexistent-id', rating=4).status_code == 404

    def test_requires_auth(self, client, make_resource):
        resource = make_resource()
        assert _review(client, {}, resource.id, rating=4).status_code == 401


class TestListReviews:
    """GET /resources/<id>/reviews"""

    def test_average_rating(self, client, make_user, make_resource):
        resource = make_resource()
        _, alice = make_user('alice@learnhub.io')
        _, bob = make_user('bob@learnhub.io')
        _review(client, alice, resource.id, rating=5)
        _review(client, bob, resource.id, rating=2)

        data = client.get(f'/resources/{resource.id}/reviews').get_json()
        assert data['count'] == 2
        assert data['average_rating'] == 3.5
        assert sorted(r['rating'] for r in data['reviews']) == [2, 5]

    def test_no_reviews(self, client, make_resource):
        resource = make_resource()
        data = client.get(f'/resources/{resource.id}/reviews').get_json()
        assert data == {'reviews': [], 'average_rating': None, 'count': 0}

    def test_unknown_resource(self, client):
        assert client.get('/resources/nonexistent-id/reviews').status_code == 404
