"""
Theurgy - Command implementations for goalstake.

Each module corresponds to a top-level CLI command:
- init:         Create the local wallet key
- status:       Show account, registration and balance
- register:     Create the on-chain user
- stake:        Join a goal with a stake
- claim:        Claim rewards for a goal
- request_data: Request verification data for a goal activity
"""
