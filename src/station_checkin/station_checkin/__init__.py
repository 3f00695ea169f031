"""Station Check-in package.

Kiosk sign-in/sign-out for fire stations: members scan a tag, number or
mobile at a kiosk, and on the way out split their time across activity
categories. Organized by feature modules (kiosk, sessions, members, ...)
with a thin Flask controller layer over service/repository layers.
"""
