"""chat-auth - account registration and email verification service."""
