"""Constants of the merchant payment API."""

# Trade types
TRADE_APP = "APP"
TRADE_JSAPI = "JSAPI"
TRADE_MWEB = "MWEB"
TRADE_NATIVE = "NATIVE"
TRADE_PAP = "PAP"

# Signature types
SIGN_MD5 = "MD5"
SIGN_HMAC_SHA256 = "HMAC-SHA256"

# Result codes
RESULT_SUCCESS = "SUCCESS"
RESULT_FAIL = "FAIL"
RESULT_NULL = "RESULT NULL"
NOT_FOUND = "NOT_FOUND"
SYSTEM_ERROR = "SYSTEMERROR"

# Trade states
TRADE_STATE_SUCCESS = "SUCCESS"
TRADE_STATE_REFUND = "REFUND"
TRADE_STATE_NOTPAY = "NOTPAY"
TRADE_STATE_CLOSED = "CLOSED"
TRADE_STATE_REVOKED = "REVOKED"
TRADE_STATE_PAYING = "USERPAYING"
TRADE_STATE_ACCEPT = "ACCEPT"
TRADE_STATE_ERROR = "PAYERROR"
TRADE_STATE_PAY_FAIL = "PAY_FAIL"

# Coupon types
COUPON_TYPE_CASH = "CASH"
COUPON_TYPE_NO_CASH = "NO_CASH"

# Refund states
REFUND_STATUS_SUCCESS = "SUCCESS"
REFUND_STATUS_CLOSED = "REFUNDCLOSE"
REFUND_STATUS_PROCESSING = "PROCESSING"
REFUND_STATUS_CHANGE = "CHANGE"

# Refund channels
REFUND_CHANNEL_ORIGINAL = "ORIGINAL"
REFUND_CHANNEL_BALANCE = "BALANCE"
REFUND_CHANNEL_OTHER_BALANCE = "OTHER_BALANCE"
REFUND_CHANNEL_OTHER_BANK_CARD = "OTHER_BANKCARD"

ORDER_NOT_EXIST = "ORDERNOTEXIST"
REFUND_NOT_EXIST = "REFUNDNOTEXIST"

# Pseudo URLs of entrust actions that are not posted
CONTRACT_OA_ENTRUST = "offical_accounts_entrust"
CONTRACT_MP_ENTRUST = "mini_program_entrust"
CONTRACT_H5_ENTRUST = "h5_entrust"

# Contract change types
CONTRACT_ADD = "ADD"
CONTRACT_DELETE = "DELETE"

# Contract entrust states
CONTRACT_ENTRUST_UNDO = "1"
CONTRACT_ENTRUST_OK = "0"
CONTRACT_ENTRUST_PROCESSING = "9"

# Contract termination modes
CONTRACT_DELETE_UNDO = "0"
CONTRACT_DELETE_EXPIRED = "1"
CONTRACT_DELETE_USER = "2"
CONTRACT_DELETE_API = "3"
CONTRACT_DELETE_PLATFORM = "4"
CONTRACT_DELETE_LOGOUT = "5"
CONTRACT_DELETE_CONTACT = "7"

# Transfer name checks
TRANSFER_NO_CHECK = "NO_CHECK"
TRANSFER_FORCE_CHECK = "FORCE_CHECK"

# Transfer states
TRANSFER_STATUS_PROCESSING = "PROCESSING"
TRANSFER_STATUS_SUCCESS = "SUCCESS"
TRANSFER_STATUS_FAILED = "FAILED"
TRANSFER_STATUS_BANK_FAIL = "BANK_FAIL"

# Redpack scenes
REDPACK_SCENE_1 = "PRODUCT_1"
REDPACK_SCENE_2 = "PRODUCT_2"
REDPACK_SCENE_3 = "PRODUCT_3"
REDPACK_SCENE_4 = "PRODUCT_4"
REDPACK_SCENE_5 = "PRODUCT_5"
REDPACK_SCENE_6 = "PRODUCT_6"
REDPACK_SCENE_7 = "PRODUCT_7"
REDPACK_SCENE_8 = "PRODUCT_8"

# Redpack states
REDPACK_STATUS_SENDING = "SENDING"
REDPACK_STATUS_SENT = "SENT"
REDPACK_STATUS_FAILED = "FAILED"
REDPACK_STATUS_RECEIVED = "RECEIVED"
REDPACK_STATUS_REFUNDING = "RFUND_ING"
REDPACK_STATUS_REFUND = "REFUND"

# Redpack types
REDPACK_TYPE_NORMAL = "NORMAL"
REDPACK_TYPE_GROUP = "GROUP"

# Redpack send types
REDPACK_SEND_TYPE_API = "API"
REDPACK_SEND_TYPE_UPLOAD = "UPLOAD"
REDPACK_SEND_TYPE_ACTIVITY = "ACTIVITY"

# Bill types
BILL_TYPE_ALL = "ALL"
BILL_TYPE_SUCCESS = "SUCCESS"
BILL_TYPE_REFUND = "REFUND"
BILL_TYPE_RECHARGE_REFUND = "RECHARGE_REFUND"

# Fund account types
ACCOUNT_TYPE_BASIC = "Basic"
ACCOUNT_TYPE_OPERATION = "Operation"
ACCOUNT_TYPE_FEES = "Fees"

RSA_PUBLIC_KEY_URL = "https://fraud.mch.weixin.qq.com/risk/getpublickey"

# Orders
ORDER_UNIFY_URL = "https://api.mch.weixin.qq.com/pay/unifiedorder"
ORDER_QUERY_URL = "https://api.mch.weixin.qq.com/pay/orderquery"
ORDER_CLOSE_URL = "https://api.mch.weixin.qq.com/pay/closeorder"

# Refunds
REFUND_APPLY_URL = "https://api.mch.weixin.qq.com/secapi/pay/refund"
REFUND_QUERY_URL = "https://api.mch.weixin.qq.com/pay/refundquery"

# Entrusted payments
PAPPAY_APP_ENTRUST_URL = "https://api.mch.weixin.qq.com/papay/preentrustweb"
PAPPAY_OA_ENTRUST_URL = "https://api.mch.weixin.qq.com/papay/entrustweb"
PAPPAY_H5_ENTRUST_URL = "https://api.mch.weixin.qq.com/papay/h5entrustweb"
PAPPAY_CONTRACT_ORDER_URL = "https://api.mch.weixin.qq.com/pay/contractorder"
PAPPAY_CONTRACT_QUERY_URL = "https://api.mch.weixin.qq.com/papay/querycontract"
PAPPAY_CONTRACT_DELETE_URL = "https://api.mch.weixin.qq.com/papay/deletecontract"
PAPPAY_APPLY_URL = "https://api.mch.weixin.qq.com/pay/pappayapply"
PAPPAY_ORDER_QUERY_URL = "https://api.mch.weixin.qq.com/pay/paporderquery"

# Transfers
TRANSFER_TO_BALANCE_URL = "https://api.mch.weixin.qq.com/mmpaymkttransfers/promotion/transfers"
TRANSFER_BALANCE_ORDER_QUERY_URL = "https://api.mch.weixin.qq.com/mmpaymkttransfers/gettransferinfo"
TRANSFER_TO_BANK_CARD_URL = "https://api.mch.weixin.qq.com/mmpaysptrans/pay_bank"
TRANSFER_BANK_CARD_ORDER_QUERY_URL = "https://api.mch.weixin.qq.com/mmpaysptrans/query_bank"

# Redpacks
REDPACK_NORMAL_URL = "https://api.mch.weixin.qq.com/mmpaymkttransfers/sendredpack"
REDPACK_GROUP_URL = "https://api.mch.weixin.qq.com/mmpaymkttransfers/sendgroupredpack"
REDPACK_MINIP_URL = "https://api.mch.weixin.qq.com/mmpaymkttransfers/sendminiprogramhb"
REDPACK_QUERY_URL = "https://api.mch.weixin.qq.com/mmpaymkttransfers/gethbinfo"

# Other
DOWNLOAD_BILL_URL = "https://api.mch.weixin.qq.com/pay/downloadbill"
DOWNLOAD_FUND_FLOW_URL = "https://api.mch.weixin.qq.com/pay/downloadfundflow"
BATCH_QUERY_COMMENT_URL = "https://api.mch.weixin.qq.com/billcommentsp/batchquerycomment"