"""
Chat app for messaging.

This app handles:
- Conversations (direct and group)
- Participants, roles and membership history
- Message posting, editing, soft deletion and attachments
- Read watermarks and typing indicators

Related apps:
    - authentication: User model and per-user typing preference
    - contacts: Block list consulted before direct conversations
    - media: Uploads whose URLs become message attachments

Usage:
    from chat.services import ConversationService, MessageService

    # Create conversation
    conversation = ConversationService.create_conversation(
        creator=user,
        conversation_type="direct",
        participant_ids=[other_user.id],
    )

    # Send message
    message = MessageService.post_message(
        sender=user,
        conversation_id=conversation.id,
        content="Hello!",
    )
"""
