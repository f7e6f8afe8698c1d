from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
try:
    resp = client.get('/health/db')
    print(resp.status_code)
    try:
        print(resp.json())
    except Exception:
        print(resp.text)
except Exception as e:
    print('DB call raised exception:', e)

print('\nMANGROVE CHECK (Sundarbans):')
print(client.get('/mangrove/detect', params={'latitude': 22.0, 'longitude': 89.0}).json())

print('\nMANGROVE CHECK (Bengaluru):')
print(client.get('/mangrove/detect', params={'latitude': 12.9716, 'longitude': 77.5946}).json())
