# ABOUTME: Core workflows built on the catalog client.
# ABOUTME: Currently the paced bulk synchronizer.
