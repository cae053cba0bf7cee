from linkedin_auth.app import main

main()
