"""
Orbital Auction demo driver

Scripted end-to-end runs of the Orbital Auction contracts:
- Contract deployment and account provisioning
- NFT and fungible token minting
- Scripted bidding, epoch advancement and payout
- Payout verification and payout weights
"""

__version__ = "0.3.0"
