"""Store connections (Shopify / WordPress) owned outside the dispatch core."""
