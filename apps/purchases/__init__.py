"""
Purchases App - Water Container Purchase Records

Records purchases that discharge a room's turn. Filing a purchase
advances the rotation exactly once and can open a courier delivery
order for the same purchase.
"""
