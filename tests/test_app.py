import pytest

from app import app


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def test_qr_json(client):
    response = client.get('/qr.json', query_string={'data': 'HELLO', 'level': 'H'})
    assert response.status_code == 200

    body = response.get_json()
    assert body['version'] == 1
    assert body['size'] == 21
    assert 0 <= body['mask_pattern'] <= 7
    assert len(body['modules']) == 21
    assert body['modules'][13][8] is True


def test_qr_png(client):
    response = client.get('/qr.png', query_string={'data': 'HELLO'})
    assert response.status_code == 200
    assert response.mimetype == 'image/png'
    assert response.data[:8] == b'\x89PNG\r\n\x1a\n'


def test_missing_data(client):
    response = client.get('/qr.json')
    assert response.status_code == 400
    assert 'data' in response.get_json()['error']


def test_bad_level(client):
    response = client.get('/qr.json', query_string={'data': 'HELLO', 'level': 'X'})
    assert response.status_code == 400


def test_too_long(client):
    response = client.get('/qr.json', query_string={'data': 'a' * 3000, 'level': 'L'})
    assert response.status_code == 413
    assert 'error' in response.get_json()
