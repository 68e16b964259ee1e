"""
Songs API — Services Layer
============================

Service Inventory:
    - SongStore (abstract): point get / point put against the record store
    - DynamoDBSongStore: concrete store over an aioboto3 DynamoDB client
    - SongService: maps store results and failures to API outcomes
"""
