"""Message bodies for outbound notifications."""

from decimal import Decimal
from typing import Optional


def format_rupiah(amount) -> str:
    """Format an amount as Indonesian rupiah, e.g. ``Rp 18.000``."""
    value = int(Decimal(amount or 0))
    return 'Rp ' + f"{value:,}".replace(',', '.')


def bypass_message(*, room_name: str, helpee_name: str, helper_name: str) -> str:
    return (
        "⚠️ *BYPASS GILIRAN!*\n---\n"
        f"Halo *{helper_name}*, *{helpee_name}* melakukan bypass di *{room_name}*.\n\n"
        "Mohon segera diproses ya. Semangat pahlawan asrama!"
    )


def turn_handoff_message(*, room_name: str, member_name: str, remaining_debt: int = 0) -> str:
    debt_note = f" (Sisa utang: {remaining_debt} galon)" if remaining_debt else ''
    return (
        "💧 *GANTI GILIRAN GALON!*\n---\n"
        f"Halo *{member_name}*, giliran Anda untuk membeli galon di *{room_name}* "
        f"telah tiba{debt_note}.\n\n"
        "Mohon segera lakukan pembelian dan upload bukti fotonya.\n\nTerima kasih!"
    )


def new_order_message(*, room_name: str, buyer_name: str, cost,
                      description: Optional[str] = None) -> str:
    return (
        "💧 *PESANAN GALON BARU!*\n---\n"
        f"📍 *Kamar:* {room_name}\n"
        f"👤 *Pemesan:* {buyer_name}\n"
        f"💰 *Biaya:* {format_rupiah(cost)}\n"
        f"📝 *Catatan:* {description or '-'}\n---\n"
        "Mohon segera diproses. Bukti pembayaran sudah diupload di sistem."
    )


def order_claimed_message(*, room_name: str, buyer_name: str, courier_name: str) -> str:
    return (
        "🚚 *PESANAN SEDANG DIPROSES!*\n---\n"
        f"Halo *{buyer_name}*, pesanan galon untuk *{room_name}* sedang diproses "
        f"oleh *{courier_name}*. Mohon ditunggu ya!"
    )


def order_delivered_message(*, room_name: str, buyer_name: str, courier_name: str) -> str:
    return (
        "✅ *GALON SUDAH SAMPAI!*\n---\n"
        f"Halo *{buyer_name}*, galon untuk *{room_name}* sudah diletakkan di lokasi "
        f"oleh *{courier_name}*. Bukti foto pengantaran bisa dicek di aplikasi. Terima kasih!"
    )


def order_cancelled_message(*, room_name: str, buyer_name: str, reason: str = '') -> str:
    reason_note = f"\nAlasan: {reason}" if reason else ''
    return (
        "❌ *PESANAN DIBATALKAN*\n---\n"
        f"Halo *{buyer_name}*, pesanan galon untuk *{room_name}* dibatalkan.{reason_note}"
    )
