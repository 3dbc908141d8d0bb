def client_summary(client):
    if client is None:
        return None
    return {'id': client.id, 'name': client.name}


def serialize_client(client):
    return {
        'id': client.id,
        'name': client.name,
        'description': client.description,
        'created_at': client.created_at.isoformat(),
        'updated_at': client.updated_at.isoformat(),
    }


def serialize_system(system):
    return {
        'id': system.id,
        'name': system.name,
        'description': system.description,
        'client_id': system.client_id,
        'created_at': system.created_at.isoformat(),
        'updated_at': system.updated_at.isoformat(),
    }
