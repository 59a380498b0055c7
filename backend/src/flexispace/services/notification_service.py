"""
Notification Service
Handles SMS notifications about bookings via Twilio
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from twilio.rest import Client

from flexispace.config import settings
from flexispace.models.booking import Booking
from flexispace.models.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
    NotificationType,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for sending notifications to guests and providers"""

    def __init__(self):
        self._twilio_client: Optional[Client] = None
        self.from_number = settings.TWILIO_PHONE_NUMBER

    @property
    def twilio_client(self) -> Optional[Client]:
        """Created on first use, and only when Twilio is configured"""
        if self._twilio_client is None and settings.sms_enabled:
            self._twilio_client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        return self._twilio_client

    def send_sms(self, to_phone: str, message: str) -> Dict[str, Any]:
        """
        Send SMS via Twilio

        Args:
            to_phone: Recipient phone number
            message: Message content

        Returns:
            Result dictionary with status
        """
        client = self.twilio_client
        if client is None:
            return {"success": False, "error": "SMS provider not configured", "to": to_phone}

        try:
            twilio_message = client.messages.create(body=message, from_=self.from_number, to=to_phone)

            return {
                "success": True,
                "message_id": twilio_message.sid,
                "status": twilio_message.status,
                "to": to_phone,
                "sent_at": datetime.utcnow(),
            }

        except Exception as e:
            logger.error(f"Failed to send SMS to {to_phone}: {str(e)}")
            return {"success": False, "error": str(e), "to": to_phone}

    @staticmethod
    def build_message(booking: Booking, notification_type: NotificationType) -> str:
        space = booking.space
        when = (
            f"Date: {booking.start_date_time.strftime('%Y-%m-%d')}\n"
            f"Time: {booking.start_date_time.strftime('%H:%M')} - {booking.end_date_time.strftime('%H:%M')}"
        )

        if notification_type == NotificationType.BOOKING_REQUESTED:
            guest_name = booking.user.name if booking.user else "A guest"
            return (
                f"New booking request - {space.title}\n\n"
                f"Guest: {guest_name}\n"
                f"{when}\n"
                f"Attendees: {booking.attendee_count}\n"
                f"Total: {booking.total_price:.2f}\n\n"
                f"Please approve or reject the request."
            )

        if notification_type == NotificationType.BOOKING_APPROVED:
            return f"Booking approved - {space.title}\n\n{when}\nTotal: {booking.total_price:.2f}\n\nSee you there!"

        if notification_type == NotificationType.BOOKING_REJECTED:
            reason = f"\nReason: {booking.rejection_reason}" if booking.rejection_reason else ""
            return f"Booking request declined - {space.title}\n\n{when}{reason}"

        if notification_type == NotificationType.BOOKING_CANCELLED:
            reason = f"\nReason: {booking.cancellation_reason}" if booking.cancellation_reason else ""
            return f"Booking cancelled - {space.title}\n\n{when}{reason}"

        invoice_number = booking.invoice.invoice_number if booking.invoice else ""
        return f"Payment received - {space.title}\n\nInvoice {invoice_number} is paid. Thank you!"

    def notify_booking_event(
        self, db: Session, booking: Booking, notification_type: NotificationType
    ) -> Notification:
        """
        Message the party concerned by a booking event and log the notification.

        New requests go to the space provider; every other event goes to the guest.

        Args:
            db: Database session
            booking: The booking the event is about
            notification_type: What happened

        Returns:
            The recorded Notification (SENT or FAILED)
        """
        if notification_type == NotificationType.BOOKING_REQUESTED:
            recipient = booking.space.user
        else:
            recipient = booking.user

        message = self.build_message(booking, notification_type)

        if recipient.phone:
            result = self.send_sms(recipient.phone, message)
        else:
            result = {"success": False, "error": "Recipient has no phone number"}

        if not result.get("success"):
            logger.error(f"{notification_type.value} notification for booking {booking.id} failed: {result.get('error')}")

        # Log notification
        notification = Notification(
            user_id=recipient.id,
            booking_id=booking.id,
            notification_type=notification_type,
            channel=NotificationChannel.SMS,
            status=(NotificationStatus.SENT if result.get("success") else NotificationStatus.FAILED),
            recipient_phone=recipient.phone,
            message=message,
            provider="twilio",
            provider_message_id=result.get("message_id"),
            sent_at=datetime.utcnow() if result.get("success") else None,
            error_message=result.get("error"),
        )
        db.add(notification)
        db.commit()

        return notification
