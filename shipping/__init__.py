"""Shipping service: cart shipping quotes and shipment tracking ids."""
