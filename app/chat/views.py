"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ConversationViewSet: Conversation CRUD plus read-cursor and typing actions
- ParticipantViewSet: Participant management (nested under conversation)
- MessageViewSet: Message operations (nested under conversation)

URL Structure:
    /api/v1/conversations/                                      GET, POST
    /api/v1/conversations/{id}/                                 GET, PATCH
    /api/v1/conversations/{id}/read/                            POST
    /api/v1/conversations/{id}/typing/                          GET, POST, DELETE
    /api/v1/conversations/{id}/participants/                    GET, POST
    /api/v1/conversations/{id}/participants/{user_id}/          DELETE
    /api/v1/conversations/{id}/messages/                        GET, POST
    /api/v1/conversations/{id}/messages/{pk}/                   GET, PATCH, DELETE
    /api/v1/conversations/{id}/messages/{pk}/attachments/       POST

Design Decisions:
    - Views pass request.user into the services and never mutate models
    - Membership and role checks live in the services; their errors are
      rendered by core.exception_handler
    - Nested views resolve the parent conversation from conversation_pk
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.models import Conversation, Message, Participant
from chat.pagination import MessageCursorPagination
from chat.serializers import (
    AttachmentCreateSerializer,
    AttachmentSerializer,
    ConversationCreateSerializer,
    ConversationDetailSerializer,
    ConversationListSerializer,
    ConversationUpdateSerializer,
    MessageCreateSerializer,
    MessageEditSerializer,
    MessageSerializer,
    ParticipantCreateSerializer,
    ParticipantSerializer,
    ReadCursorSerializer,
    TypingIndicatorSerializer,
)
from chat.services import (
    AttachmentService,
    ConversationService,
    MessageService,
    ParticipantService,
    TypingService,
)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_conversations",
        summary="List conversations",
        tags=["Chat - Conversations"],
    ),
    create=extend_schema(
        operation_id="create_conversation",
        summary="Create conversation",
        description=(
            "Direct: exactly one other user; an existing conversation between "
            "the pair is returned instead of a new one. Group: a name and 2-50 "
            "other users. The creator becomes the owner."
        ),
        request=ConversationCreateSerializer,
        responses={
            201: ConversationDetailSerializer,
            404: OpenApiResponse(description="A participant does not exist"),
            409: OpenApiResponse(description="Refused by the conversation policy"),
        },
        tags=["Chat - Conversations"],
    ),
    retrieve=extend_schema(
        operation_id="get_conversation",
        summary="Get conversation",
        tags=["Chat - Conversations"],
    ),
    partial_update=extend_schema(
        operation_id="update_conversation",
        summary="Update conversation",
        request=ConversationUpdateSerializer,
        responses={200: ConversationDetailSerializer},
        tags=["Chat - Conversations"],
    ),
)
class ConversationViewSet(viewsets.GenericViewSet):
    """
    ViewSet for conversation operations.

    list:
        Get all conversations the current user is an active participant of,
        most recent activity first, with unread counts.

    create:
        Create a new conversation (direct or group).

    retrieve:
        Get conversation details including all participants.

    partial_update:
        Update group name, description or avatar. Owners and admins only.

    read:
        Advance the user's read watermark.

    typing:
        List, start or stop typing indicators.
    """

    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        """Filter to conversations where user is an active participant."""
        if getattr(self, "swagger_fake_view", False):
            return Conversation.objects.none()
        return ConversationService.list_for_user(self.request.user)

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == "list":
            return ConversationListSerializer
        if self.action == "create":
            return ConversationCreateSerializer
        if self.action == "partial_update":
            return ConversationUpdateSerializer
        return ConversationDetailSerializer

    def _get_conversation(self, pk) -> Conversation:
        return ConversationService.get_conversation(self.request.user, int(pk))

    def list(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ConversationListSerializer(
                page, many=True, context=self.get_serializer_context()
            )
            return self.get_paginated_response(serializer.data)

        serializer = ConversationListSerializer(
            queryset, many=True, context=self.get_serializer_context()
        )
        return Response(serializer.data)

    def create(self, request):
        """Create a conversation (direct or group)."""
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        conversation = ConversationService.create_conversation(
            creator=request.user,
            conversation_type=data["conversation_type"],
            participant_ids=data["participant_ids"],
            name=data.get("name"),
            description=data.get("description"),
            avatar_url=data.get("avatar_url"),
        )

        output = ConversationDetailSerializer(
            conversation, context=self.get_serializer_context()
        )
        return Response(output.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        conversation = self._get_conversation(pk)
        output = ConversationDetailSerializer(
            conversation, context=self.get_serializer_context()
        )
        return Response(output.data)

    def partial_update(self, request, pk=None):
        """Update group name, description or avatar."""
        conversation = self._get_conversation(pk)
        serializer = ConversationUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        conversation = ConversationService.update_conversation(
            request.user, conversation, **serializer.validated_data
        )

        output = ConversationDetailSerializer(
            conversation, context=self.get_serializer_context()
        )
        return Response(output.data)

    @extend_schema(
        operation_id="mark_conversation_read",
        summary="Mark conversation as read",
        description=(
            "Move the read watermark to message_id. The watermark never moves "
            "backwards; repeating the current position is a no-op."
        ),
        request=ReadCursorSerializer,
        responses={200: ParticipantSerializer},
        tags=["Chat - Conversations"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        """Advance the read watermark."""
        serializer = ReadCursorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        participant = MessageService.mark_read(
            request.user, int(pk), serializer.validated_data["message_id"]
        )
        return Response(ParticipantSerializer(participant).data)

    @extend_schema(
        methods=["GET"],
        operation_id="list_typing_users",
        summary="Who is typing",
        responses={200: TypingIndicatorSerializer(many=True)},
        tags=["Chat - Typing"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="start_typing",
        summary="Start typing",
        request=None,
        responses={204: None},
        tags=["Chat - Typing"],
    )
    @extend_schema(
        methods=["DELETE"],
        operation_id="stop_typing",
        summary="Stop typing",
        responses={204: None},
        tags=["Chat - Typing"],
    )
    @action(detail=True, methods=["get", "post", "delete"])
    def typing(self, request, pk=None):
        """Typing indicators for this conversation."""
        conversation = self._get_conversation(pk)

        if request.method == "POST":
            TypingService.start_typing(request.user, conversation)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if request.method == "DELETE":
            TypingService.stop_typing(request.user, conversation)
            return Response(status=status.HTTP_204_NO_CONTENT)

        typers = TypingService.active_typers(request.user, conversation)
        return Response(TypingIndicatorSerializer(typers, many=True).data)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_participants",
        summary="List participants",
        tags=["Chat - Participants"],
    ),
    create=extend_schema(
        operation_id="add_participant",
        summary="Add participant",
        request=ParticipantCreateSerializer,
        responses={
            201: ParticipantSerializer,
            403: OpenApiResponse(description="Not an owner/admin"),
            409: OpenApiResponse(
                description="Direct conversation, already a member or group full"
            ),
        },
        tags=["Chat - Participants"],
    ),
    destroy=extend_schema(
        operation_id="remove_participant",
        summary="Remove participant",
        description="Removing yourself leaves the conversation.",
        responses={
            204: None,
            409: OpenApiResponse(
                description="Direct conversation or group minimum reached"
            ),
        },
        tags=["Chat - Participants"],
    ),
)
class ParticipantViewSet(viewsets.GenericViewSet):
    """
    ViewSet for participant operations within a conversation.

    list:
        Get all active participants in the conversation.

    create:
        Add a participant to a group conversation.
        Requires admin or owner role.

    destroy:
        Remove a participant (by user id), or leave when it is yourself.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ParticipantSerializer
    pagination_class = None

    def get_conversation(self) -> Conversation:
        """Get the parent conversation from URL."""
        return ConversationService.get_conversation(
            self.request.user, self.kwargs["conversation_pk"]
        )

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Participant.objects.none()
        return ParticipantService.list_participants(
            self.request.user, self.get_conversation()
        )

    def list(self, request, conversation_pk=None):
        serializer = ParticipantSerializer(self.get_queryset(), many=True)
        return Response(serializer.data)

    def create(self, request, conversation_pk=None):
        """Add a participant to the conversation."""
        conversation = self.get_conversation()

        serializer = ParticipantCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        participant = ParticipantService.add_participant(
            actor=request.user,
            conversation=conversation,
            user_id=serializer.validated_data["user_id"],
            role=serializer.validated_data["role"],
        )

        return Response(
            ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED
        )

    def destroy(self, request, conversation_pk=None, user_id=None):
        """Remove a participant from the conversation."""
        conversation = self.get_conversation()

        ParticipantService.remove_participant(
            actor=request.user,
            conversation=conversation,
            user_id=int(user_id),
        )

        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_messages",
        summary="List messages",
        description="Oldest first by sequence. Deleted messages appear as tombstones.",
        tags=["Chat - Messages"],
    ),
    create=extend_schema(
        operation_id="post_message",
        summary="Post message",
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
        tags=["Chat - Messages"],
    ),
    retrieve=extend_schema(
        operation_id="get_message",
        summary="Get message",
        tags=["Chat - Messages"],
    ),
    partial_update=extend_schema(
        operation_id="edit_message",
        summary="Edit message",
        request=MessageEditSerializer,
        responses={
            200: MessageSerializer,
            403: OpenApiResponse(description="Not the sender"),
            409: OpenApiResponse(description="Message is deleted"),
        },
        tags=["Chat - Messages"],
    ),
    destroy=extend_schema(
        operation_id="delete_message",
        summary="Delete message",
        description="Idempotent. Senders, owners and admins may delete.",
        responses={204: None},
        tags=["Chat - Messages"],
    ),
)
class MessageViewSet(viewsets.GenericViewSet):
    """
    ViewSet for message operations within a conversation.

    list:
        Get all messages in the conversation, tombstones included.
        Uses cursor pagination on sequence, oldest first.

    create:
        Post a message, optionally replying to another one and carrying
        attachment metadata.

    partial_update:
        Edit the content of your own message.

    destroy:
        Soft delete a message.

    attachments:
        Attach an already-uploaded file to your message.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = MessageSerializer
    pagination_class = MessageCursorPagination

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Message.objects.none()
        return MessageService.list_messages(
            self.request.user, self.kwargs["conversation_pk"]
        )

    def get_object(self) -> Message:
        return MessageService.get_message(
            self.request.user, self.kwargs["conversation_pk"], int(self.kwargs["pk"])
        )

    def list(self, request, conversation_pk=None):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = MessageSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)

        return Response(MessageSerializer(queryset, many=True).data)

    def create(self, request, conversation_pk=None):
        """Post a message."""
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        message = MessageService.post_message(
            sender=request.user,
            conversation_id=conversation_pk,
            message_type=data["message_type"],
            content=data.get("content"),
            media_url=data.get("media_url"),
            reply_to_id=data.get("reply_to_id"),
            attachments=data.get("attachments", ()),
        )

        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, conversation_pk=None, pk=None):
        return Response(MessageSerializer(self.get_object()).data)

    def partial_update(self, request, conversation_pk=None, pk=None):
        """Edit a message."""
        message = self.get_object()

        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        message = MessageService.edit_message(
            request.user, message.id, serializer.validated_data["content"]
        )
        return Response(MessageSerializer(message).data)

    def destroy(self, request, conversation_pk=None, pk=None):
        """Soft delete a message."""
        message = self.get_object()
        MessageService.delete_message(request.user, message.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="create_attachment",
        summary="Attach file to message",
        description="Records metadata for a file previously stored via /media/upload/.",
        request=AttachmentCreateSerializer,
        responses={
            201: AttachmentSerializer,
            403: OpenApiResponse(description="Not the sender"),
            409: OpenApiResponse(description="Message is deleted"),
        },
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["post"])
    def attachments(self, request, conversation_pk=None, pk=None):
        """Attach metadata for an uploaded file."""
        message = self.get_object()

        serializer = AttachmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        attachment = AttachmentService.create_attachment(
            request.user, message, **serializer.validated_data
        )
        return Response(
            AttachmentSerializer(attachment).data, status=status.HTTP_201_CREATED
        )
