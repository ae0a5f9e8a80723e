"""Webhook receiver resources.

Usage
-----
Import the receiver for route registration::

    from weir.api.webhooks.resources import BitbucketCloudWebhookResource
"""
