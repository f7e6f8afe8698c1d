"""
Services layer - business logic for Mangrove Watch.
Routes translate HTTP into service calls; services own Firestore access.
"""
